"""Render classified and summarized articles for reporting."""

from common.models import Article


def format_as_markdown(article: Article, debug: bool = False) -> str:
    text = f"# {article.title}\n\n{article.summary}\n\nRead more [here]({article.link})"

    if debug:
        text += "\n\n---\n\n**Debug info:**\n\n"
        text += f"**len(Description):** {len(article.description)}\n"
        text += f"**len(Content):** {len(article.content)}\n\n"
        for match in article.category_relevance:
            text += (
                f"**Category:** {match.category}\n\n"
                f"**Relevance:** {match.relevance:.1f}\n\n"
                f"**Explanation**: {match.explanation or ''}\n\n"
            )
        text += "\n\n---\n\n"

    return text


def format_as_slack_mrkdwn(article: Article, debug: bool = False) -> str:
    # Slack mrkdwn has no "- " bullets and uses single asterisks for bold
    summary = article.summary.replace("- ", "• ").replace("**", "*")

    text = f"*{article.title}*\n\n{summary}\n\nRead more <{article.link}|here>"

    if debug:
        text += "\n---\n*Debug info:*\n"
        text += f"*len(Description):* {len(article.description)}\n"
        text += f"*len(Content):* {len(article.content)}\n"
        for match in article.category_relevance:
            text += (
                f"*Category:* {match.category}\n"
                f"*Relevance:* {match.relevance:.1f}\n"
                f"*Explanation*: {match.explanation or ''}\n\n"
            )
        text += "\n---\n"

    return text
