from cv_analyzer.ai.types import ChatMessage

SYSTEM_PROMPT = (
    "You are an expert CV/Resume analyzer. Analyze the provided CV and give detailed feedback "
    "including ATS score, strengths, weaknesses, improvements, and keyword suggestions. "
    "Structure the answer as numbered sections such as '1. ATS Score' and '2. Key Issues'. "
    "For each issue write 'Priority: 🔴' (critical), 'Priority: 🟡' (important) or 'Priority: 🟢' (optional) "
    "followed by the lines '- Problem: ...', '- Impact: ...' and '- Solution: ...', then a blank line. "
    "For rewrite suggestions write '❌ Before: ...', '✅ After: ...' and 'Why this is better: ...' on consecutive lines. "
    "For section feedback use '- ✅ What Works: ...', '- ❌ What Doesn't: ...' and '- 🔧 How to Fix: ...'. "
    "Otherwise format your response using markdown with ## for headers, **bold** for important text, "
    "and - for bullet points."
)


def build_user_prompt(cv_text: str, position: str | None = None, job_requirements: str | None = None) -> str:
    parts = ["Please analyze this CV and provide detailed insights:"]
    role = (position or "").strip()
    if role:
        parts.append(f"Target position: {role}")
    requirements = (job_requirements or "").strip()
    if requirements:
        parts.append(f"Job requirements:\n{requirements}")
    parts.append(cv_text)
    return "\n\n".join(parts)


def build_analysis_messages(
    cv_text: str,
    position: str | None = None,
    job_requirements: str | None = None,
) -> list[ChatMessage]:
    return [
        ChatMessage(role="system", content=SYSTEM_PROMPT),
        ChatMessage(role="user", content=build_user_prompt(cv_text, position, job_requirements)),
    ]
