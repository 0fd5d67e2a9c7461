"""Setup (provisioning) services.

This package contains orchestration helpers that *provision* or *verify* external
infrastructure required by the tool (e.g., the S3 bucket holding Terraform state).
"""
