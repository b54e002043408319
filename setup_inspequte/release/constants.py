"""Identity of the tool and the registry repository it is released from."""

TOOL_NAME = "inspequte"
TOOL_REPOSITORY = "KengoTODA/inspequte"

# Prefix of this tool's own release tags. The repository also publishes
# unrelated artifacts (e.g. "gradle-plugin-v1.0.0") under other prefixes.
TOOL_PREFIX = f"{TOOL_NAME}-"
RELEASE_TAG_PREFIX = f"{TOOL_NAME}-v"

DEFAULT_API_URL = "https://api.github.com"
USER_AGENT = "setup-inspequte"
ACCEPT_HEADER = "application/vnd.github+json"
RELEASES_PER_PAGE = 100
