"""
Deployer Package
Configuration resolution and the deployment workflow
"""
