"""Error taxonomy shared by the auth layer, the Spotify client and the dispatcher."""


class SpotifyMCPError(Exception):
    """Base class for every error raised by this package."""


class NotAuthenticated(SpotifyMCPError):
    def __init__(self, session_id: str):
        super().__init__("Not authenticated. Please authenticate with Spotify first.")
        self.session_id = session_id


class TokenRefreshFailed(SpotifyMCPError):
    def __init__(self, status_text: str):
        super().__init__(f"Failed to refresh token: {status_text}")
        self.status_text = status_text


class TokenExchangeFailed(SpotifyMCPError):
    def __init__(self, status_text: str):
        super().__init__(f"Failed to exchange code for token: {status_text}")
        self.status_text = status_text


class UpstreamError(SpotifyMCPError):
    """Non-2xx response from the Spotify Web API."""

    def __init__(self, status: int, body: str):
        super().__init__(f"Spotify API error: {status} {body}")
        self.status = status
        self.body = body


class InvalidArgument(SpotifyMCPError):
    pass


class UnknownTool(SpotifyMCPError):
    def __init__(self, name: str):
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class MissingParameter(SpotifyMCPError):
    pass


class InvalidState(SpotifyMCPError):
    pass


class SpotifyUnavailable(SpotifyMCPError):
    """The Web API could not be reached (connection failure or timeout)."""

    def __init__(self, reason: str):
        super().__init__(f"Spotify API request failed: {reason}")
        self.reason = reason
