"""
Document Scanner Module
Finds Word documents in a folder and its subfolders
"""

import os
from typing import Dict, List, Optional
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class DocumentScanner:
    def __init__(self, extensions: Optional[List[str]] = None, backup_dir_name: str = "_word_replacer_backup"):
        self.extensions = [ext.lower() for ext in (extensions or [".docx", ".doc", ".docm"])]
        self.backup_dir_name = backup_dir_name

    def is_candidate(self, file_name: str, extensions: Optional[List[str]] = None) -> bool:
        """Check whether a file name looks like a document we should process"""
        # Word owner files (~$report.docx) and hidden files
        if file_name.startswith("~$") or file_name.startswith("."):
            return False
        wanted = [ext.lower() for ext in extensions] if extensions else self.extensions
        return os.path.splitext(file_name)[1].lower() in wanted

    def scan(self, folder: str, recursive: bool = True, extensions: Optional[List[str]] = None) -> List[str]:
        """
        Find all documents under a folder

        Args:
            folder: Root folder to search
            recursive: Include subfolders
            extensions: Optional list of extensions (defaults to the scanner's)

        Returns:
            Sorted list of absolute file paths
        """
        if not os.path.exists(folder):
            raise FileNotFoundError(f"Folder not found: {folder}")
        if not os.path.isdir(folder):
            raise NotADirectoryError(f"Not a folder: {folder}")

        root_folder = os.path.abspath(folder)
        documents = []

        for current_dir, dir_names, file_names in os.walk(root_folder):
            # Never descend into our own backups or hidden folders
            dir_names[:] = [
                d for d in dir_names
                if d != self.backup_dir_name and not d.startswith(".")
            ]
            for file_name in file_names:
                if self.is_candidate(file_name, extensions):
                    documents.append(os.path.join(current_dir, file_name))
            if not recursive:
                break

        documents.sort()
        logger.info(f"Found {len(documents)} documents in {root_folder}")
        return documents

    def summarize(self, files: List[str], folder: str) -> Dict[str, int]:
        """Count files in the root folder vs. subfolders"""
        root_folder = os.path.abspath(folder)
        root_files = [f for f in files if os.path.dirname(os.path.abspath(f)) == root_folder]
        return {
            'total': len(files),
            'root': len(root_files),
            'subfolders': len(files) - len(root_files)
        }

    def describe(self, files: List[str], folder: str) -> str:
        """Short location info for messages, e.g. '3 in root, 2 in subfolders'"""
        counts = self.summarize(files, folder)
        location_info = f"{counts['root']} in root"
        if counts['subfolders'] > 0:
            location_info += f", {counts['subfolders']} in subfolders"
        return location_info
