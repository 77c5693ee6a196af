from __future__ import annotations

from typing import Any, Dict

from ..models import GeneratorConfig

IMAGE_FORMAT = (
    '<img src="https://image.pollinations.ai/prompt/{english_keywords}'
    '?width=1280&height=720&nologo=true&seed={random_seed}" alt="{korean_alt_text}" />'
)

# Gemini responseSchema for the draft reply
DRAFT_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "title": {"type": "STRING"},
        "content": {"type": "STRING"},
        "tags": {"type": "ARRAY", "items": {"type": "STRING"}},
        "sources": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "title": {"type": "STRING"},
                    "url": {"type": "STRING"},
                },
            },
        },
    },
    "required": ["title", "content", "tags", "sources"],
}


def build_draft_prompt(config: GeneratorConfig) -> str:
    return (
        "You are an expert content writer for a Korean audience, specializing in synthesizing news "
        "from the Naver ecosystem and analyzing Global Trends.\n\n"
        "Task: Create a high-quality blog post based on the following parameters:\n"
        f'- Keywords/Topic: "{config.keywords}"\n'
        f'- Timeframe Context: "{config.period.value}"\n'
        f'- Tone/Style: "{config.tone.descriptor}"\n'
        f'- Target Length: "{config.length.descriptor}"\n\n'
        "Requirements:\n"
        "1. Title: Catchy, SEO-optimized for Naver Search.\n"
        "2. Content:\n"
        "   - Write in fluent Korean.\n"
        "   - Structure with HTML tags (<h2>, <p>, <ul>, <strong>, <blockquote>).\n"
        "   - DO NOT output a full HTML document (no <html> or <body> tags), just the inner content.\n"
        "   - VISUALS: You MUST insert 2-3 High-Definition images.\n"
        f"     - Use this EXACT format: {IMAGE_FORMAT}\n"
        "     - {english_keywords}: 3-5 simple, concrete English keywords describing the scene, "
        'separated by "%20" (e.g. futuristic%20office%20seoul%20night). DO NOT use full sentences.\n'
        "     - {random_seed}: A random integer (e.g. 4829) to ensure the image is unique every time.\n"
        "     - {korean_alt_text}: Descriptive alt text in Korean.\n"
        '   - GLOBAL PERSPECTIVE: Include a dedicated section for "Global Case Studies" '
        "(해외 사례/트렌드) comparing the topic with examples from the US, Europe, or Japan.\n"
        "   - Ensure the content flows logically: Introduction -> Domestic News Synthesis -> "
        "Global Case Studies -> In-depth Analysis -> Conclusion.\n"
        "3. Tags: Generate 5 relevant hashtags.\n"
        "4. Sources:\n"
        "   - Invent 2-3 realistic Naver News source titles (Domestic).\n"
        "   - Invent 2 reputable Global source titles (e.g., Bloomberg, TechCrunch, BBC) relevant to the case studies.\n\n"
        "Output MUST be a single JSON object with keys: title (string), content (string, HTML), "
        "tags (array of strings), sources (array of objects with title and url).\n"
        "Do not include markdown, code fences, or extra text.\n"
    )


def build_refine_prompt(body: str, instruction: str) -> str:
    return (
        "You are an AI Editor Assistant.\n"
        f"Current Blog Content (HTML):\n{body}\n\n"
        f'User Instruction: "{instruction}"\n\n'
        "Task: Rewrite the content to satisfy the user's instruction.\n"
        "- Keep the HTML structure valid.\n"
        '- CRITICAL: Do NOT remove or modify any <img src="..."> tags. Keep them exactly where they are.\n'
        "- Return ONLY the updated HTML content string.\n"
    )


def build_translate_prompt(body: str, target_language: str) -> str:
    return (
        "You are a professional translator.\n"
        f'Task: Translate the following HTML blog content into "{target_language}".\n\n'
        "Rules:\n"
        "- Preserve ALL HTML tags, classes, and structure exactly.\n"
        "- Do NOT translate attributes like 'src', 'class', 'id'.\n"
        "- Do NOT translate English text inside 'src' URLs.\n"
        "- Only translate the visible human-readable text.\n"
        "- Return ONLY the translated HTML string.\n\n"
        f"Content:\n{body}\n"
    )
