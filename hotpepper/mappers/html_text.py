from bs4 import BeautifulSoup, Tag


def parse_html(html: str) -> BeautifulSoup:
    return BeautifulSoup(html or "", "html.parser")


def clean_text(node: Tag | None) -> str:
    """Visible text of a node with runs of whitespace collapsed to one space."""
    if node is None:
        return ""
    return " ".join(node.get_text(" ").split())
