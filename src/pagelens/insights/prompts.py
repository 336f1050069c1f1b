"""
Prompt templates for the text-generation service.

The response format each template asks for is what the matching parser in
``parsers.py`` expects.
"""

from __future__ import annotations

CATEGORY_VOCABULARY = (
    "Technology",
    "Business",
    "Education",
    "Entertainment",
    "Health",
    "Science",
    "Sports",
    "Politics",
    "Lifestyle",
    "News",
    "Blog",
    "E-commerce",
    "Documentation",
    "Portfolio",
)

SUMMARY_PROMPT = (
    "Analyze the following web page content and provide a concise 2-3 sentence summary "
    "of what this page is about:\n\n{content}"
)

TOPICS_PROMPT = (
    "Extract 5-7 key topics or themes from the following content. "
    "Return only the topics as a comma-separated list:\n\n{content}"
)

SENTIMENT_PROMPT = (
    "Analyze the overall sentiment of the following content. Respond with one word "
    '("positive", "negative", or "neutral") followed by a line of the form '
    '"Confidence: <0-100>":\n\n{content}'
)

CATEGORIES_PROMPT = (
    "Categorize the following content into 2-4 categories from this list: "
    + ", ".join(CATEGORY_VOCABULARY)
    + ". Return only the categories as a comma-separated list:\n\n{content}"
)

ENTITIES_PROMPT = (
    "List the named entities mentioned in the following content. Respond with exactly four lines:\n"
    "People: <comma-separated names or none>\n"
    "Organizations: <comma-separated names or none>\n"
    "Locations: <comma-separated names or none>\n"
    "Technologies: <comma-separated names or none>\n\n{content}"
)

KEYWORDS_PROMPT = (
    "Identify the {limit} most important keywords in the following content and rate the "
    "relevance of each from 0 to 100. Respond with one keyword per line in the form "
    '"keyword: relevance":\n\n{content}'
)

QUALITY_PROMPT = (
    "Assess the quality of the following web page content (clarity, depth, structure, "
    "usefulness). Give 3-5 short, actionable insights, one per line:\n\n{content}"
)

COMPETITIVE_PROMPT = (
    "Considering pages that compete for the same audience, suggest 3-5 ways the following "
    "content could stand out. One suggestion per line:\n\n{content}"
)

PARAGRAPH_PROMPT = (
    "Summarize the following paragraph in one concise sentence and rate how important it is "
    "to the page from 0 to 100. Respond in the form:\n"
    "Summary: <sentence>\n"
    "Importance: <number>\n\n{content}"
)
