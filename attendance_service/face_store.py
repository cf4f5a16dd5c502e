"""
Face store module.

Loads registered face templates from a folder of images and keeps them in
memory for the lifetime of the process. One image per person; the file
name without extension is the identity name.
"""

import glob
import os
import cv2
import numpy as np
from dataclasses import dataclass
from typing import Iterator, List, Optional
from .config import Config
from .logging_config import get_logger
from .recognition.preprocessing import normalize_face

logger = get_logger(__name__)

_FORBIDDEN_NAME_CHARS = ('/', '\\', ',')


@dataclass
class FaceRecord:
    """A registered face: identity name, ordinal id and normalized template."""

    name: str
    id: int
    template: np.ndarray


def validate_identity_name(name: str) -> str:
    """
    Check that a name can be used as a file name and CSV field.

    Args:
        name: Identity name typed by the operator

    Returns:
        The stripped name

    Raises:
        ValueError: If the name is empty or contains whitespace,
            path separators or commas
    """
    name = name.strip()
    if not name:
        raise ValueError('Name must not be empty')
    if any(ch.isspace() for ch in name):
        raise ValueError('Name must not contain spaces')
    if any(ch in name for ch in _FORBIDDEN_NAME_CHARS):
        raise ValueError('Name must not contain "/", "\\" or ","')
    return name


def name_from_path(path: str) -> str:
    """Identity name for an image path: basename without extension."""
    return os.path.splitext(os.path.basename(path))[0]


class FaceStore:
    """
    Ordered, in-memory list of face records.

    Ids are assigned 1, 2, 3... in load then insertion order and are never
    reused while the process runs. Names are not required to be unique.
    """

    def __init__(
        self,
        config: Config,
        records: Optional[List[FaceRecord]] = None,
        directory: Optional[str] = None
    ):
        self.config = config
        self.directory = directory or config.faces_dir
        self._records: List[FaceRecord] = list(records or [])
        self._last_id = max((r.id for r in self._records), default=0)

    @classmethod
    def load(cls, directory: str, config: Config) -> 'FaceStore':
        """
        Load every template image in a directory.

        Files that fail to decode are skipped with a warning. A missing
        or empty directory gives an empty store.

        Args:
            directory: Folder of face images
            config: Service configuration

        Returns:
            Populated FaceStore
        """
        logger.info(f"Loading face database from '{directory}' folder...")
        store = cls(config, directory=directory)

        if not os.path.isdir(directory):
            logger.warning(f"Face folder '{directory}' does not exist")
            return store

        files = sorted(glob.glob(os.path.join(directory, config.face_glob)))

        for path in files:
            image = cv2.imread(path, cv2.IMREAD_GRAYSCALE)
            if image is None:
                logger.warning(f'Could not load {path}, skipping')
                continue

            template = normalize_face(image, config.template_size)
            store._append(name_from_path(path), template)

        logger.info(f'Loaded {len(store)} registered faces')
        return store

    def add(
        self,
        name: str,
        template: np.ndarray,
        backing_image: np.ndarray
    ) -> FaceRecord:
        """
        Register a new face.

        The backing image is written to the store's directory first; the record
        is only appended once the write succeeded.

        Args:
            name: Identity name
            template: Normalized template
            backing_image: Original frame saved as <name><ext>

        Returns:
            The new FaceRecord

        Raises:
            OSError: If the image cannot be written
        """
        if self.find_by_name(name):
            logger.warning(f"A face named '{name}' is already registered, adding another record")

        path = self.image_path(name)
        os.makedirs(self.directory, exist_ok=True)

        try:
            written = cv2.imwrite(path, backing_image)
        except cv2.error as e:
            raise OSError(f'Could not write face image {path}: {e}') from e

        if not written:
            raise OSError(f'Could not write face image {path}')
        logger.info(f'Face image saved as {path}')

        record = self._append(name, template)
        logger.info(f"Person '{record.name}' added to database (id={record.id})")
        return record

    def image_path(self, name: str) -> str:
        """Path of the backing image for a name."""
        return os.path.join(self.directory, f'{name}{self.config.face_image_ext}')

    def find_by_name(self, name: str) -> List[FaceRecord]:
        """All records registered under a name (linear scan)."""
        return [r for r in self._records if r.name == name]

    def _append(self, name: str, template: np.ndarray) -> FaceRecord:
        self._last_id += 1
        record = FaceRecord(name=name, id=self._last_id, template=template)
        self._records.append(record)
        return record

    @property
    def records(self) -> List[FaceRecord]:
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[FaceRecord]:
        return iter(self._records)

    def __getitem__(self, index: int) -> FaceRecord:
        return self._records[index]


def load_face_store(config: Config) -> FaceStore:
    """Load the store from the configured face folder."""
    return FaceStore.load(config.faces_dir, config)
