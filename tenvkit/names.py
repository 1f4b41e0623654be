"""Tool names, API messages and the errors raised when talking to release APIs."""

AGNOSTIC_NAME = "tf"
ATMOS_NAME = "atmos"
TENV_NAME = "tenv"
TERRAFORM_NAME = "terraform"
TERRAGRUNT_NAME = "terragrunt"
TOFU_NAME = "tofu"

OPENTOFU_NAME = "opentofu"

CALL_SUB_CMD = "call"

ASSETS_NAME = "assets"
MSG_FETCH_ALL_RELEASES = "Fetching all releases information from "
MSG_FETCH_RELEASE = "Fetching release information from "
MSG_SEARCH = "Search"


class ApiError(Exception):
    """Base class for errors reported while reading a release API."""

    default_message = "API error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class AssetNotFoundError(ApiError):
    """A searched release asset does not exist."""

    default_message = "searched asset not found"


class UnexpectedReturnError(ApiError):
    """The API answered with data of an unexpected shape."""

    default_message = "unexpected value returned by API"


class RateLimitError(ApiError):
    """The GitHub API refused the call because of rate limiting."""

    default_message = (
        "you are rate-limited by GitHub. Consider using a token by setting "
        "the TENV_GITHUB_TOKEN env variable to increase the rate limit"
    )