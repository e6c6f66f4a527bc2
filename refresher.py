import logging
import tempfile

from errors import CloneError, SyncError, WorkspaceError
from utils import run_command

logger = logging.getLogger(__name__)

SOURCE_SUBDIR = "web/"
# ACME http-01 challenge files live here; a refresh must not delete them.
PRESERVED_PATH = ".well-known"
TMP_DIR_PREFIX = "website-files"


class SiteRefresher:
    """
    Publishes one branch of the site repository into a target directory:
      1) Shallow-clones the branch into a fresh temporary directory.
      2) Mirrors the checkout's web/ folder into the target with rsync,
         deleting files that no longer exist upstream.

    The temporary checkout is removed afterwards whether or not the refresh
    succeeded. A failed sync can leave the target partially updated.
    """

    def __init__(self, run=run_command):
        self._run = run

    def refresh(self, git_url: str, branch: str, target_dir: str) -> None:
        try:
            workspace = tempfile.TemporaryDirectory(prefix=TMP_DIR_PREFIX)
        except OSError as e:
            raise WorkspaceError(f"Could not create temporary directory: {e}") from e

        with workspace as tmp_dir:
            self._clone(git_url, branch, tmp_dir)
            self._sync(tmp_dir, target_dir)

    def _clone(self, git_url: str, branch: str, tmp_dir: str) -> None:
        command = ["git", "clone", "--depth", "1", "--branch", branch, git_url, tmp_dir]
        try:
            result = self._run(command)
        except OSError as e:
            logger.error(f"Error cloning from git: {e}")
            raise CloneError(f"Could not run git: {e}") from e

        if result.returncode != 0:
            logger.error(f"Error cloning from git: exit status {result.returncode}\n{result.stdout}\n{result.stderr}")
            raise CloneError(
                f"git clone of branch '{branch}' failed with exit status {result.returncode}",
                returncode=result.returncode,
                stdout=result.stdout,
                stderr=result.stderr
            )

    def _sync(self, tmp_dir: str, target_dir: str) -> None:
        command = ["rsync", "-c", "-r", "--delete", f"--exclude={PRESERVED_PATH}", SOURCE_SUBDIR, target_dir]
        try:
            result = self._run(command, cwd=tmp_dir)
        except OSError as e:
            logger.error(f"Error syncing cloned files to target dir {target_dir}: {e}")
            raise SyncError(f"Could not run rsync: {e}") from e

        if result.returncode != 0:
            logger.error(
                f"Error syncing cloned files to target dir {target_dir}: exit status {result.returncode}\n"
                f"{result.stdout}\n{result.stderr}"
            )
            raise SyncError(
                f"rsync into '{target_dir}' failed with exit status {result.returncode}",
                returncode=result.returncode,
                stdout=result.stdout,
                stderr=result.stderr
            )
