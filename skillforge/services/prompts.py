from __future__ import annotations

import json
from typing import Any

ROAST_LEVELS = ("Mild", "Medium", "Spicy")
ROADMAP_LEVELS = ("Beginner", "Intermediate", "Advanced")
JOB_PLATFORMS = ("LinkedIn", "Naukri", "Indeed", "AngelList", "Instahyre", "Glassdoor")

AUDIT_SCHEMA: dict[str, Any] = {
    "profileSummary": "A 2-3 sentence professional summary",
    "detectedRole": "e.g. Junior MERN Stack Developer",
    "experienceLevel": "Entry Level",
    "atsScore": 78,
    "aiSpeakScore": 25,
    "aiDetectionWarning": None,
    "sectionAnalysis": {
        "mostViewed": "Projects",
        "insight": "Your Projects section is getting strong attention",
    },
    "recommendedJobs": [
        {
            "role": "Junior Frontend Engineer",
            "matchConfidence": 85,
            "avgSalary": "₹4L - ₹8L",
            "reason": "Strong React skills",
            "applyOn": ["LinkedIn", "Naukri", "Indeed"],
        },
        {
            "role": "Full Stack Developer",
            "matchConfidence": 78,
            "avgSalary": "₹5L - ₹10L",
            "reason": "Good MERN stack experience",
            "applyOn": ["AngelList", "Instahyre", "Naukri"],
        },
    ],
    "detectedSkills": {
        "technical": ["React", "Node.js", "MongoDB"],
        "soft": ["Team Collaboration", "Problem Solving"],
    },
    "skillGaps": {
        "critical": ["Unit Testing"],
        "recommended": ["Docker"],
        "niceToHave": ["GraphQL"],
    },
    "recommendedSkillsToLearn": [
        {"skill": "Docker", "priority": "High", "reason": "Most backend roles expect containerised deployments"},
    ],
    "strengths": ["Consistent project portfolio"],
    "weaknesses": ["No quantified impact"],
    "careerProgression": {
        "currentLevel": "Junior Developer",
        "nextLevel": "Mid-level Developer",
        "timeframe": "12-18 months",
        "keyMilestones": ["Own a production feature end to end"],
    },
    "improvements": ["Add metrics", "Link GitHub", "Add certifications"],
    "actionableInsights": [
        "Add quantifiable metrics to your project descriptions",
        "Include more keywords related to cloud technologies",
    ],
}

TAILOR_SCHEMA: dict[str, Any] = {
    "matchScore": 72,
    "hiringVerdict": "High Risk / Medium Risk / Low Risk",
    "verdict_explanation": "You lack 2-3 'Must-Have' skills that appear in the JD.",
    "keywordGapMatrix": {
        "matched": ["React", "Node.js", "MongoDB", "REST APIs"],
        "missing": ["Redux", "Unit Testing", "AWS Lambda", "CI/CD Pipelines"],
        "preferredButNotCritical": ["TypeScript", "GraphQL"],
    },
    "bulletPointFixes": [
        {
            "original": "Worked on a team to build a website.",
            "improved": (
                "Collaborated with a cross-functional team of 4 to architect and deploy a MERN-stack "
                "e-commerce platform, reducing page load time by 20%."
            ),
            "suggestion": "This rewrite adds metrics, technology specifics, and JD alignment.",
        }
    ],
    "missingKeywordsSuggestions": [
        {"skill": "Redux", "suggestion": "Add to your 'E-commerce Project' description: 'Managed complex state using Redux'."},
        {"skill": "Unit Testing", "suggestion": "Mention Jest testing in your project experience."},
    ],
    "similarRolesAtOtherCompanies": "Similar roles exist at companies hiring for the same stack.",
    "detectedJobTitle": "Senior Full Stack Engineer (React + Node.js)",
    "requiredSkills": ["React", "Node.js", "AWS", "Unit Testing"],
    "yaltoScore": 45,
}

ATS_SCHEMA: dict[str, Any] = {
    "match_score": 65,
    "hard_skills_missing": ["Kubernetes", "TypeScript"],
    "soft_skills_missing": ["Leadership", "Agile"],
    "formatting_issues": ["No quantifying metrics found", "Summary too vague"],
    "correction": (
        "Rewrite the bullet point 'Worked on backend' to: 'Engineered a Node.js microservice handling "
        "10k req/s, reducing latency by 40%.'"
    ),
}

ROAST_SCHEMA: dict[str, Any] = {
    "playful_roast": ["One-liner roast about the resume"],
    "strengths": ["What genuinely works"],
    "gaps": ["What is missing or weak"],
    "actionable_improvements": ["Concrete fix"],
    "warnings": ["Anything that could get the resume auto-rejected"],
}

GITHUB_SCHEMA: dict[str, Any] = {
    "summary": "2-3 sentence overview of the developer",
    "developer_level": "Junior / Mid / Senior",
    "hiring_readiness": 70,
    "strengths": ["Consistent commits to web projects"],
    "improvements": ["Add READMEs with screenshots"],
    "tech_stack": {"frontend": ["React"], "backend": ["Node.js"]},
    "top_projects": [{"name": "repo-name", "why": "What makes it stand out"}],
    "project_ideas": ["A project that would close the biggest gap"],
}

LINKEDIN_SCHEMA: dict[str, Any] = {
    "visual_score": 78,
    "critique": "List 2-4 specific issues separated by | . No compliments.",
    "headline_suggestion": "Improved headline under 90 chars",
    "action_items": ["3-5 punchy fixes"],
    "photo_report": {
        "strengths": ["short strengths"],
        "issues": ["short issues"],
        "suggestions": ["short fixes"],
        "quality_score": 70,
        "helpful_data": {
            "background": "clean/busy/needs blur",
            "lighting": "good/harsh/dim",
            "framing": "tight/loose/awkward crop",
            "attire": "appropriate/upgrade",
            "expression": "friendly/neutral/serious",
        },
    },
}

ROADMAP_SCHEMA: dict[str, Any] = {
    "skill": "Docker",
    "currentLevel": "Beginner",
    "estimatedDuration": "6 weeks",
    "phases": [
        {
            "title": "Foundations",
            "duration": "1 week",
            "topics": ["Images vs containers"],
            "projects": ["Containerise a small API"],
        }
    ],
    "tips": ["Practice on real projects"],
}

ROAST_TONES = {
    "Mild": "Keep it light and friendly: gentle teasing, no harsh words.",
    "Medium": "Be witty and direct: call out weak spots with humour but stay kind.",
    "Spicy": "Be brutally honest and savage, but never insulting about the person, only the resume.",
}


def _schema(schema: dict[str, Any]) -> str:
    return json.dumps(schema, ensure_ascii=False, indent=2)


def _quote(text: str, limit: int) -> str:
    return (text or "").strip()[:limit]


def build_audit_prompt(resume_text: str, *, limit: int = 4000, with_guardrails: bool = False) -> str:
    prompt = (
        "Act as a Senior Tech Recruiter and Career Advisor. "
        "Conduct a comprehensive analysis of this resume:\n\n"
        f"\"{_quote(resume_text, limit)}\"\n\n"
        "Return ONLY a valid JSON object with EXACTLY this structure (no markdown, no extra text):\n"
        f"{_schema(AUDIT_SCHEMA)}\n"
    )
    if with_guardrails:
        prompt += (
            "\nIMPORTANT SCORING GUARDRAILS:\n"
            "- atsScore: 0-100, but for reasonably complete resumes aim for the 70-90 range. "
            "Only drop below 60 if the resume is extremely sparse or irrelevant.\n"
            "- aiSpeakScore: 0-100 (0=human, 100=AI-generated).\n"
            "- If aiSpeakScore > 70, set aiDetectionWarning to a warning message.\n"
            f"- applyOn should contain 2-4 platforms from: {', '.join(JOB_PLATFORMS)}.\n"
        )
    return prompt


def build_tailor_prompt(resume_text: str, job_description: str, *, limit: int = 3000) -> str:
    return (
        "Act as an ATS Specialist and Elite Hiring Manager. Perform a detailed JD-to-Resume comparison.\n\n"
        f"Resume: \"{_quote(resume_text, limit)}\"\n"
        f"Job Description: \"{_quote(job_description, limit)}\"\n\n"
        "Return a strictly valid JSON object with EXACTLY this structure:\n"
        f"{_schema(TAILOR_SCHEMA)}\n\n"
        "matchScore and yaltoScore are integers 0-100 (yaltoScore 100 = exact match, consider level too). "
        "hiringVerdict must be one of: High Risk, Medium Risk, Low Risk."
    )


def build_ats_prompt(resume_text: str, job_description: str) -> str:
    return (
        "You are an Enterprise Applicant Tracking System (ATS) Expert.\n\n"
        f"Candidate Resume:\n\"{resume_text}\"\n\n"
        f"Target Job Description:\n\"{job_description}\"\n\n"
        "Task: Perform a strict Gap Analysis. Identify why this resume might get rejected by a robot.\n\n"
        "Return strictly JSON:\n"
        f"{_schema(ATS_SCHEMA)}\n\n"
        "match_score is an integer 0-100. hard_skills_missing lists critical technical gaps; "
        "soft_skills_missing lists soft skill gaps."
    )


def build_roast_prompt(resume_text: str, level: str, *, limit: int = 4000) -> str:
    tone = ROAST_TONES.get(level, ROAST_TONES["Mild"])
    return (
        f"You are a stand-up comedian who moonlights as a tech recruiter. Roast this resume at '{level}' heat. "
        f"{tone}\n\n"
        f"Resume:\n\"{_quote(resume_text, limit)}\"\n\n"
        "Every joke must point at something real in the resume. Follow the roast with honest, useful feedback.\n"
        "Return ONLY a valid JSON object with EXACTLY this structure:\n"
        f"{_schema(ROAST_SCHEMA)}\n\n"
        "playful_roast has 3-5 lines; every other list has 2-5 short items. "
        "If the text does not look like a resume, say so in warnings."
    )


def build_github_prompt(
    profile: dict[str, Any],
    repos: list[dict[str, Any]],
    top_languages: list[str],
) -> str:
    profile_context = {
        "login": profile.get("login"),
        "name": profile.get("name"),
        "bio": profile.get("bio"),
        "followers": profile.get("followers"),
        "public_repos": profile.get("public_repos"),
        "created_at": profile.get("created_at"),
    }
    return (
        "You are a Senior Engineering Manager reviewing a candidate's GitHub profile.\n\n"
        f"Profile: {json.dumps(profile_context, ensure_ascii=False)}\n"
        f"Recent repositories: {json.dumps(repos, ensure_ascii=False)}\n"
        f"Top languages (by repo count): {', '.join(top_languages) or 'unknown'}\n\n"
        "Assess the developer's level, strengths and gaps based only on this data.\n"
        "Return ONLY a valid JSON object with EXACTLY this structure:\n"
        f"{_schema(GITHUB_SCHEMA)}\n\n"
        "hiring_readiness is an integer 0-100. "
        "If you cannot infer a tech_stack list, return [\"Detected\"] for it."
    )


def build_linkedin_prompt() -> str:
    return (
        "You are a Personal Branding Consultant for Tech Professionals.\n"
        "Analyze this LinkedIn profile screenshot with special focus on the profile photo quality.\n"
        "Be concise, constructive, and avoid any praise in the critique. "
        "If the profile is strong, still give 2 short nits.\n\n"
        "Output STRICT JSON only (no prose). Hard limits: keep each string under 120 characters.\n"
        f"{_schema(LINKEDIN_SCHEMA)}\n\n"
        "visual_score and photo_report.quality_score are integers 0-100."
    )


def build_roadmap_prompt(skill: str, current_level: str) -> str:
    return (
        "You are a pragmatic senior engineer and mentor.\n"
        f"Create a learning roadmap for '{skill}' for someone at the '{current_level}' level.\n"
        "Keep it practical: 3-6 phases, each with concrete topics and a hands-on project.\n"
        "Return ONLY a valid JSON object with EXACTLY this structure:\n"
        f"{_schema(ROADMAP_SCHEMA)}"
    )
