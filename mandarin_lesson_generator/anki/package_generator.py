"""
Anki package (.apkg) generation using genanki library.

Audio is referenced by id only; no media files are embedded.
"""

import hashlib
import logging
import os
import zipfile
from pathlib import Path
from typing import List, Optional, Union

import genanki

from ..config import Config
from ..models import Flashcard
from .templates import CardFormatter, LessonCardTemplate


logger = logging.getLogger(__name__)


class AnkiPackageGenerator:
    """
    Generates .apkg files from generated flashcards.

    Note GUIDs are derived from flashcard ids and the deck id from the deck
    name, so exporting the same lesson twice updates notes in place instead
    of duplicating them.
    """

    def __init__(self):
        """Initialize the package generator."""
        self.model = LessonCardTemplate.create_model()
        self.formatter = CardFormatter()

    def generate_package(self, flashcards: List[Flashcard], output_path: Union[str, Path],
                         deck_name: Optional[str] = None) -> bool:
        """
        Generate an Anki package from flashcards.

        Args:
            flashcards: Flashcards to export
            output_path: Path where to save the .apkg file
            deck_name: Name for the Anki deck (Config.ANKI_DECK_NAME if None)

        Returns:
            True if package was created successfully, False otherwise
        """
        deck_name = deck_name or Config.ANKI_DECK_NAME
        try:
            deck_id = self.generate_deck_id(deck_name)
            deck = genanki.Deck(deck_id, deck_name)
            logger.info(f"Created deck: {deck_name} (ID: {deck_id})")

            notes_created = 0
            for flashcard in flashcards:
                note = self._create_note(flashcard)
                if note:
                    deck.add_note(note)
                    notes_created += 1

            if notes_created == 0:
                logger.error("No notes could be created; package not written")
                return False

            output_path = Path(output_path)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            genanki.Package(deck).write_to_file(str(output_path))

            logger.info(f"Successfully created Anki package with {notes_created} notes: {output_path}")
            return True

        except Exception as e:
            logger.error(f"Failed to generate Anki package: {e}")
            return False

    def _create_note(self, flashcard: Flashcard) -> Optional[genanki.Note]:
        try:
            fields = self.formatter.format_card_fields(flashcard)
            return genanki.Note(
                model=self.model,
                fields=[fields[name] for name in LessonCardTemplate.FIELD_NAMES],
                tags=self.formatter.anki_tags(flashcard.tags),
                guid=genanki.guid_for(flashcard.id),
            )
        except Exception as e:
            logger.error(f"Failed to create note for {flashcard.id}: {e}")
            return None

    @staticmethod
    def generate_deck_id(deck_name: str) -> int:
        """
        Derive a stable deck id from the deck name.

        Returns:
            Positive integer below 2**31
        """
        digest = hashlib.md5(deck_name.encode("utf-8")).hexdigest()
        deck_id = int(digest[:8], 16) % 2147483647
        return deck_id or 1


class PackageValidator:
    """
    Validates written Anki packages.
    """

    @staticmethod
    def validate_package(package_path: Union[str, Path]) -> bool:
        """
        Check that a package exists, has the .apkg extension and is a
        readable archive holding an Anki collection.

        Args:
            package_path: Path to the .apkg file

        Returns:
            True if package is valid, False otherwise
        """
        package_path = str(package_path)
        if not os.path.exists(package_path):
            logger.error(f"Package file not found: {package_path}")
            return False

        if not package_path.lower().endswith('.apkg'):
            logger.error(f"Invalid file extension: {package_path}")
            return False

        if os.path.getsize(package_path) == 0:
            logger.error(f"Package file is empty: {package_path}")
            return False

        try:
            with zipfile.ZipFile(package_path) as archive:
                names = archive.namelist()
        except zipfile.BadZipFile as e:
            logger.error(f"Package is not a valid archive: {e}")
            return False

        if not any(name.startswith('collection.anki') for name in names):
            logger.error(f"Package has no Anki collection: {package_path}")
            return False

        logger.info(f"Package validation passed: {package_path}")
        return True

    @staticmethod
    def get_package_info(package_path: Union[str, Path]) -> dict:
        """
        Get information about an Anki package.

        Returns:
            Dictionary with path, exists, size_bytes and valid keys
        """
        package_path = str(package_path)
        exists = os.path.exists(package_path)
        return {
            'path': package_path,
            'exists': exists,
            'size_bytes': os.path.getsize(package_path) if exists else 0,
            'valid': PackageValidator.validate_package(package_path) if exists else False,
        }
