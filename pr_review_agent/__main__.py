"""Command-line entry point: python -m pr_review_agent."""

if __name__ == "__main__":
    import sys

    from pr_review_agent.review_pipeline_main import main

    sys.exit(main())
