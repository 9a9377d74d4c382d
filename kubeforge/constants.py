"""
KubeForge Constants

Centralized constants for magic values, defaults, and configuration.
"""

# SSH Configuration
DEFAULT_SSH_PORT = 22
SSH_CONNECTION_TIMEOUT = 15

# Provider Defaults
DEFAULT_PROVIDER = "aws"

# Cluster Configuration
POD_NETWORK_CIDR = "10.244.0.0/16"
FLANNEL_MANIFEST_URL = (
    "https://raw.githubusercontent.com/flannel-io/flannel/master/"
    "Documentation/kube-flannel.yml"
)

# Remote Paths
KUBERNETES_CONFIG_DIR = "/etc/kubernetes"
CLOUD_CONF_PATH = f"{KUBERNETES_CONFIG_DIR}/cloud.conf"
AZURE_JSON_PATH = f"{KUBERNETES_CONFIG_DIR}/azure.json"
OCI_CONF_PATH = f"{KUBERNETES_CONFIG_DIR}/oci.conf"

# Metadata Endpoints
AWS_METADATA_URL = "http://169.254.169.254/latest/meta-data"
GCP_METADATA_URL = "http://metadata.google.internal/computeMetadata/v1"
AZURE_METADATA_URL = "http://169.254.169.254/metadata"
AZURE_METADATA_API_VERSION = "2019-06-01"

# GCP OAuth scope required by the GCE cloud provider
GCP_COMPUTE_SCOPE = "https://www.googleapis.com/auth/compute"

# Log Configuration
LOG_DIR = "~/.kubeforge/logs"
LOG_DATE_FORMAT = "%Y-%m-%d"
LOG_TIME_FORMAT = "%H-%M-%S"
