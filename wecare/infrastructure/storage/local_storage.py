import os
from datetime import datetime, timezone

from ...application.ports.storage_repo import StorageRepository


class LocalStorageRepository(StorageRepository):
    def __init__(self, upload_dir: str, url_prefix: str = "/uploads") -> None:
        self.upload_dir = upload_dir
        self.url_prefix = url_prefix.rstrip("/")

    def save_bytes(self, subdir: str, filename: str, data: bytes) -> str:
        """Write the file and return the public URL path it is served under."""
        timestamped = f"{int(datetime.now(timezone.utc).timestamp()*1000)}_{filename}"
        dest_dir = os.path.join(self.upload_dir, subdir) if subdir else self.upload_dir
        os.makedirs(dest_dir, exist_ok=True)
        path = os.path.join(dest_dir, timestamped)
        with open(path, "wb") as f:
            f.write(data)
        return "/".join(p for p in (self.url_prefix, subdir, timestamped) if p)
