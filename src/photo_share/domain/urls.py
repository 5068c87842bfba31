"""Public object-storage URL construction."""


def build_url(public_base: str, container_name: str, image_name: str) -> str:
    """Return the public URL of an object.

    Names are joined as-is; callers are responsible for sanitising them.
    """
    return f"{public_base}/{container_name}/{image_name}"


def object_storage_public_base(access_point: str, project_id: str) -> str:
    """Return the public account URL for an object-storage project."""
    return f"https://{access_point}/v1/AUTH_{project_id}"
