"""
Word Replacer Configuration
Default settings used by the desktop tool and the command line.
Edit the values below to change defaults without touching the code.
"""

# Document types handed to the replacement engine
EXTENSIONS = [".docx", ".doc", ".docm"]

SETTINGS = {
    "extensions": EXTENSIONS,
    # auto = Microsoft Word when available, python-docx otherwise
    "engine": "auto",
    "backup_dir_name": "_word_replacer_backup",
    "logs_dir": "logs",

    # Word lifecycle
    "visible": False,
    "max_restarts": 3,
    "max_attempts_per_document": 2,
    "busy_retry_count": 5,
    "busy_retry_delay": 0.5,

    # Search defaults
    "match_case": False,
    "whole_word": False,
    "recursive": True,
    "include_headers": True,

    # Ask before processing more files than this from the form
    "large_batch_threshold": 100,
}


def get_settings():
    """Return a copy of the default settings"""
    data = dict(SETTINGS)
    data["extensions"] = list(EXTENSIONS)
    return data
