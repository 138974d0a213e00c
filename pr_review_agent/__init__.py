# PR Review Agent - Review Pipeline Package
#
# This package contains the 5-stage review pipeline that runs on every
# pull_request event. Each stage is in its own file following the
# one-function-per-file architecture pattern.
#
# The pipeline is orchestrated by review_pipeline_main.py and runs
# inside a GitHub Actions Ubuntu runner. It reads the GitHub event
# payload (pull request), calls external APIs (GitHub REST, Gemini),
# and writes back to GitHub (PR comment, optional commit status).
#
# Stage flow:
#   1. Select Files -> 2. Build Review Prompt -> 3. Model Review
#   -> 4. Interpret Result -> 5. Post Review & Decide

__version__ = "1.0.0"
