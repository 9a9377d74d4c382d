"""KubeForge - Kubernetes Cloud Installer"""

__version__ = "1.0.0"
