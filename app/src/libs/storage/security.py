from src.libs.storage.schemas import ConfigModel


class SecurityConfig(ConfigModel):
    """
    Access policy applied to requests for a category or handler.

    Attributes:
        require_auth (bool): Requests must carry an authenticated user.
        require_owner (bool): Requests must carry the owning user.
        require_role (tuple[str, ...]): Roles of which the user needs at least one.
        encrypt_at_rest (bool): Objects are encrypted before storage.
        generate_thumbnail (bool): Thumbnails are generated on upload.
        presigned_url_expiry (int): Lifetime of presigned URLs in seconds.
        max_download_count (int): Download limit per object, 0 for unlimited.
    """

    require_auth: bool = False
    require_owner: bool = False
    require_role: tuple[str, ...] = ()

    encrypt_at_rest: bool = False
    generate_thumbnail: bool = False

    presigned_url_expiry: int = 0
    max_download_count: int = 0

    @property
    def is_restricted(self) -> bool:
        return self.require_auth or self.require_owner
