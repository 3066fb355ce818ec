"""
Command-line Scripts
Deployment, verification and pre-deployment checks
"""
