CLASSIFY_ARTICLE_INSTRUCTIONS = """
You are given a list of categories to evaluate.
For each category, decide how relevant the user's article is to that category.

Scoring
A relevance score on a scale of 0 to 10, where 0 means "no connection" and 10 means "highly relevant".
A short explanation for the assigned score.

Output format (JSON only, no markdown)
Return an array with one object per category:
[
  {
    "category": "<category name>",
    "relevance": <integer from 0 to 10>,
    "explanation": "<brief explanation>"
  }
]
If you must return a JSON object, put the array under the key "categories".

Categories:
"""
