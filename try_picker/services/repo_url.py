"""Recognize repository URLs typed by the user and normalize them for cloning."""

import re

KNOWN_HOSTS = ("github.com", "gitlab.com", "bitbucket.org", "codeberg.org")

HOST_ALIASES = {
    "gh": "github.com",
    "gl": "gitlab.com",
    "bb": "bitbucket.org",
}

_OWNER = r"(?P<owner>[\w-]+)"
_REPO = r"(?P<repo>[\w.-]+?)"
_HOST = "(?P<host>" + "|".join(re.escape(h) for h in KNOWN_HOSTS) + ")"
_ALIAS = "(?P<alias>" + "|".join(re.escape(a) for a in HOST_ALIASES) + ")"

_PATTERNS = [
    re.compile(rf"^https?://{_HOST}/{_OWNER}/{_REPO}(?:\.git)?/?$"),
    re.compile(rf"^{_HOST}/{_OWNER}/{_REPO}(?:\.git)?/?$"),
    re.compile(rf"^git@{_HOST}:{_OWNER}/{_REPO}(?:\.git)?$"),
    re.compile(rf"^{_ALIAS}:{_OWNER}/{_REPO}(?:\.git)?$"),
]


def recognize(text: str) -> tuple[bool, str]:
    """Return (True, canonical https clone URL) if text names a repository.

    Never raises; anything unrecognized gives (False, "").
    """
    text = text.strip()
    for pattern in _PATTERNS:
        m = pattern.match(text)
        if m is None:
            continue
        groups = m.groupdict()
        host = groups.get("host") or HOST_ALIASES[groups["alias"]]
        repo = groups["repo"]
        if repo in (".", ".."):
            continue
        return True, f"https://{host}/{groups['owner']}/{repo}.git"
    return False, ""


def derive_folder_name(url: str) -> str:
    """Last path segment of url without `.git`, made safe to use as a directory name."""
    if url.endswith(".git"):
        url = url[: -len(".git")]
    name = url.rstrip("/").rsplit("/", 1)[-1]
    name = name.replace("..", "")
    name = name.replace("/", "-").replace("\\", "-")
    if name in ("", "."):
        return "repo"
    return name
