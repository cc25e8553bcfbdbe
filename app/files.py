import logging
import os
import re
import secrets
import time

logger = logging.getLogger(__name__)

CATEGORIES = {
    "submission": "submissions",
    "timetable": "timetables",
    "photo": "photos",
}

_UNSAFE = re.compile(r"[^A-Za-z0-9_.-]")


def sanitize_filename(name):
    return _UNSAFE.sub("_", name or "")


class FileStore:
    """Uploaded files kept on disk, one sub-directory per category."""

    def __init__(self, root):
        self.root = os.fspath(root)

    def directory(self, category):
        try:
            return os.path.join(self.root, CATEGORIES[category])
        except KeyError:
            raise ValueError(f"unknown upload category: {category}") from None

    def path_for(self, category, stored_name):
        return os.path.join(self.directory(category), stored_name)

    def ensure_dirs(self):
        for category in CATEGORIES:
            os.makedirs(self.directory(category), exist_ok=True)

    def save_upload(self, category, original_name, data):
        stamp = int(time.time() * 1000)
        stored_name = f"{stamp}-{secrets.randbelow(10**9)}-{sanitize_filename(original_name)}"
        directory = self.directory(category)
        os.makedirs(directory, exist_ok=True)
        with open(os.path.join(directory, stored_name), "wb") as fh:
            fh.write(data)
        logger.info("Stored %s upload %s (%d bytes)", category, stored_name, len(data))
        return stored_name

    def delete_upload(self, category, stored_name):
        if not stored_name:
            return
        try:
            os.remove(self.path_for(category, stored_name))
            logger.info("Deleted %s upload %s", category, stored_name)
        except FileNotFoundError:
            pass

    def latest_upload(self, category):
        directory = self.directory(category)
        try:
            entries = [e for e in os.scandir(directory)
                       if not e.name.startswith(".") and e.is_file()]
        except FileNotFoundError:
            return None
        stamped = []
        for entry in entries:
            try:
                stamped.append((entry.stat().st_mtime_ns, entry.name))
            except FileNotFoundError:
                # removed after the directory was listed
                continue
        if not stamped:
            return None
        return max(stamped)[1]
