from __future__ import annotations

from gigdraft.types import ApprovedProfile, JobDetails

PROOF_OF_WORK_PLACEHOLDER = "[Briefly mention a relevant past project similar to this one]"
DEFAULT_JOB_TITLE = "Freelance Position"
DEFAULT_APPLICANT_NAME = "Professional"
MAX_EXPERIENCE_ENTRIES = 3

RESUME_EXTRACTION_PROMPT = """
You are extracting structured profile data from a resume.
Return ONLY a valid JSON object (no prose, no markdown) with this structure:

{{
  "personalInfo": {{
    "name": "Full name",
    "email": "Email address",
    "phone": "Phone number",
    "location": "City, State/Country"
  }},
  "skills": ["Technical and professional skills"],
  "workExperience": [
    {{
      "company": "Company name",
      "position": "Job title",
      "duration": "Start date - End date",
      "description": "Short description of responsibilities and achievements"
    }}
  ],
  "education": [
    {{
      "institution": "School or university name",
      "degree": "Degree type and field",
      "duration": "Start date - End date"
    }}
  ],
  "summary": "A short professional summary grounded in the resume"
}}

Only include information that is clearly present in the resume.
Use null for any field that is missing. All values must be strings or arrays as shown.

Resume text:
{resume_text}
""".strip()

APPLICATION_DRAFT_PROMPT = """
You are helping a freelancer write a bid-winning application for a job posted on a freelancing marketplace.

**Job Details:**
Title: {job_title}
Description: {job_description}

Required Skills: {job_skills}

**Applicant Profile:**
Name: {applicant_name}
Skills: {applicant_skills}
{profile_sections}

**Instructions (follow every one exactly):**

1. GREETING: Open with a friendly, professional greeting such as "Hi there,". Do NOT use placeholders like "[Employer Name]" or "Sir/Madam". You do not know the employer's name, so never invent one.

2. PROJECT FOCUS: Show a precise understanding of THIS project. Refer directly to the job description: "{job_description}". Say what the client is trying to achieve.

3. SKILL MATCHING: Compare the required skills ({job_skills}) with the applicant's skills ({applicant_skills}) and name 1-2 skills that clearly match, explaining how each applies to this project.

4. RELEVANT EXPERIENCE: If the applicant's experience matches this project, mention 1-2 specific examples. Otherwise explain how the skills transfer.

5. LENGTH: Write 2-3 SHORT paragraphs at most. Be direct.

6. QUESTION: End with exactly ONE specific, open-ended question about the project that invites a reply.

7. PROOF PLACEHOLDER: Include this placeholder text exactly as written: "{proof_placeholder}"

8. NO GENERIC LANGUAGE: Avoid filler such as "I am a hard worker" or "I can help you". Every sentence must be specific to this job and this applicant.

9. TONE: Professional, warm and human. No corporate jargon.

Write the application draft now.
""".strip()


def build_resume_prompt(resume_text: str) -> str:
    return RESUME_EXTRACTION_PROMPT.format(resume_text=resume_text)


def format_experience(profile: ApprovedProfile) -> str:
    entries = (profile.work_experience or [])[:MAX_EXPERIENCE_ENTRIES]
    return "\n".join(
        f"{exp.position or ''} at {exp.company or ''} ({exp.duration or ''}): {exp.description or ''}"
        for exp in entries
    )


def format_education(profile: ApprovedProfile) -> str:
    return ", ".join(
        f"{edu.degree or ''} from {edu.institution or ''}" for edu in profile.education or []
    )


def build_draft_prompt(job: JobDetails, profile: ApprovedProfile) -> str:
    personal = profile.personal_info
    sections: list[str] = []
    if profile.summary:
        sections.append(f"Summary: {profile.summary}")
    experience = format_experience(profile)
    if experience:
        sections.append(f"Recent Experience:\n{experience}")
    education = format_education(profile)
    if education:
        sections.append(f"Education: {education}")

    return APPLICATION_DRAFT_PROMPT.format(
        job_title=job.title or DEFAULT_JOB_TITLE,
        job_description=job.description or "",
        job_skills=", ".join(job.skills or []),
        applicant_name=(personal.name if personal else None) or DEFAULT_APPLICANT_NAME,
        applicant_skills=", ".join(profile.skills or []),
        profile_sections="\n\n".join(sections),
        proof_placeholder=PROOF_OF_WORK_PLACEHOLDER,
    )
