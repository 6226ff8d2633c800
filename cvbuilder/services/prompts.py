EXTRACTION_PROMPT = (
    "Extract ALL text from this document. "
    "If it's a CV/resume, extract all personal information, education, work experience, skills, and references. "
    "If it's a certificate, extract the name, institution, date, and qualification. "
    "If it's a job advertisement, extract the job title, company, location, requirements, and description. "
    "Return the extracted text in a structured format."
)

NO_JOB_CONTEXT = "No specific job selected - create a general professional CV and cover letter."

JOB_CONTEXT = "The user is applying for: {title} at {company} in {location}. Job description: {description}"

GENERATION_PROMPT = """You are an expert CV writer specializing in the {region} job market. Based on the following extracted document text, create a professional CV and cover letter.

EXTRACTED DOCUMENT TEXT:
{extracted_text}

JOB CONTEXT:
{job_context}

IMPORTANT INSTRUCTIONS:
1. Extract real information from the documents where available; never replace a real value with a placeholder
2. For any missing information, create realistic placeholder data appropriate for {region}
3. Emphasize community involvement and leadership (important in {region} culture)
4. Include both English proficiency and {secondary_language} if mentioned
5. Format for ATS (Applicant Tracking Systems)
6. atsScore is an integer from 0 to 100

Return a JSON object with this EXACT structure (no markdown, no code fences, no text before or after, just pure JSON):
{{
  "extractedData": {{
    "name": "Full Name from document or '{applicant_placeholder}'",
    "province": "Province from document or '{default_province}'",
    "phone": "Phone from document or '{phone_placeholder}'",
    "email": "Email from document or '{email_placeholder}'",
    "education": "Education details, each on new line",
    "experience": "Work experience with bullet points",
    "skills": ["Array", "of", "skills"],
    "summary": "Professional summary paragraph",
    "communityLeadership": "Community and volunteer work",
    "referees": [
      {{"name": "Referee Name", "title": "Title, Company", "phone": "{phone_placeholder}"}}
    ]
  }},
  "generatedContent": {{
    "resume": "Full formatted resume text",
    "coverLetter": "Full cover letter text",
    "atsScore": 85
  }}
}}"""
