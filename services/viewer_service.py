import logging
import re
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LinkRule:
    """How to recognize one shape of share link and rebuild it.

    ``pattern`` must have a named group ``file_id``.
    """
    name: str
    pattern: re.Pattern
    preview_template: str
    download_template: str

    def match(self, url):
        found = self.pattern.search(url)
        return found.group("file_id") if found else None


DRIVE_PREVIEW = "https://drive.google.com/file/d/{file_id}/preview"
DRIVE_DOWNLOAD = "https://drive.google.com/uc?export=download&id={file_id}"

LINK_RULES = [
    LinkRule(
        "drive-file-path",
        re.compile(r"/d/(?P<file_id>.+?)/view"),
        DRIVE_PREVIEW,
        DRIVE_DOWNLOAD,
    ),
    LinkRule(
        "drive-id-param",
        re.compile(r"[?&]id=(?P<file_id>[^&#]+)"),
        DRIVE_PREVIEW,
        DRIVE_DOWNLOAD,
    ),
]


def register_rule(rule, first=False):
    if first:
        LINK_RULES.insert(0, rule)
    else:
        LINK_RULES.append(rule)


def find_rule(url):
    """Return (rule, file_id) for the first matching rule, or (None, None)."""
    if not url:
        return None, None
    for rule in LINK_RULES:
        file_id = rule.match(url)
        if file_id:
            return rule, file_id
    return None, None


def extract_file_id(url):
    return find_rule(url)[1]


def to_preview_url(url):
    """Embeddable preview URL, or the link unchanged if it is not recognized."""
    rule, file_id = find_rule(url)
    if rule is None:
        logger.debug(f"No preview rule for {url!r}, using it as is")
        return url
    return rule.preview_template.format(file_id=file_id)


def to_download_url(url):
    rule, file_id = find_rule(url)
    if rule is None:
        return url
    return rule.download_template.format(file_id=file_id)
