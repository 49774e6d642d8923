import json
import logging
from pathlib import Path
from typing import Any, Dict, Protocol
import aiofiles
from docrelay.utils.file_utils import ensure_directory_exists

logger = logging.getLogger("metadata_store")


class MetadataStore(Protocol):
    """
    Key-value capability that keeps lookup metadata for relayed files.
    """

    async def put(self, key: str, value: str, metadata: Dict[str, Any]) -> None:
        ...


class FileMetadataStore:
    """
    Stores each key as a JSON `.meta` file inside a directory.

    Writes are blind overwrites; nothing is read back here.
    """

    def __init__(self, directory: Path):
        self.directory = Path(directory)
        ensure_directory_exists(self.directory)

    def path_for(self, key: str) -> Path:
        return self.directory / f"{Path(key).name}.meta"

    async def put(self, key: str, value: str, metadata: Dict[str, Any]) -> None:
        meta_path = self.path_for(key)
        async with aiofiles.open(meta_path, "w") as f:
            await f.write(json.dumps({"key": key, "value": value, "metadata": metadata}))
        logger.info(f"Saved metadata for {key} to {meta_path}")
