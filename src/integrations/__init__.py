"""
Integrations for external services and APIs.

This package contains the GitHub App client used to read registry content,
list pull request files and post comments.
"""
