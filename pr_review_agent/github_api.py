"""
GitHub API — PR Review Agent

Thin wrapper around the GitHub REST API for the three operations the
pipeline needs: list the files of a pull request, post a comment on it, and
set a commit status on its head commit. Uses the GITHUB_TOKEN that Actions
provides, which needs:
- pull-requests:read (list files)
- issues:write (comment; PR comments live on the issues endpoint)
- statuses:write (only when commit statuses are enabled)
"""

import requests
import structlog

from .models import ChangedFile


logger = structlog.get_logger(__name__)

# GitHub caps per_page at 100 for the list-files endpoint.
FILES_PER_PAGE = 100
STATUS_CONTEXT = "ai-pr-review"


class GitHubAPI:
    """Thin wrapper around the GitHub REST API for the operations we need."""

    def __init__(self, owner: str, repo: str, token: str, session=None):
        self.owner = owner
        self.repo = repo
        self.base_url = f"https://api.github.com/repos/{owner}/{repo}"
        self.session = session or requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        })

    def close(self):
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def list_pull_request_files(self, pr_number: int) -> list:
        """
        List every changed file of a pull request, in GitHub's order.

        Follows pages until a short page comes back. GitHub serves at most
        3000 files per pull request through this endpoint.
        """
        url = f"{self.base_url}/pulls/{pr_number}/files"
        files = []
        page = 1
        while True:
            resp = self.session.get(
                url, params={"per_page": FILES_PER_PAGE, "page": page}, timeout=30
            )
            resp.raise_for_status()
            items = resp.json()
            files.extend(ChangedFile.from_api(item) for item in items)
            logger.debug("Fetched pull request files page", pr_number=pr_number, page=page, count=len(items))
            if len(items) < FILES_PER_PAGE:
                break
            page += 1
        return files

    def post_comment(self, issue_number: int, body: str):
        """Post a comment on a pull request (via the issues endpoint)."""
        url = f"{self.base_url}/issues/{issue_number}/comments"
        resp = self.session.post(url, json={"body": body}, timeout=30)
        resp.raise_for_status()
        return resp.json()

    def create_commit_status(self, sha: str, state: str, description: str):
        """Set a commit status. `state` is one of success, failure, pending, error."""
        url = f"{self.base_url}/statuses/{sha}"
        data = {
            "state": state,
            # GitHub rejects descriptions longer than 140 characters.
            "description": description[:140],
            "context": STATUS_CONTEXT,
        }
        resp = self.session.post(url, json=data, timeout=30)
        resp.raise_for_status()
        return resp.json()
