"""Shell command catalogs for each provisioning stage.

Commands are plain strings sent over SSH. ``|| true`` marks steps that may
legitimately fail when the state is already applied.
"""

from dataclasses import dataclass
from typing import Dict, List

from kubeforge.constants import FLANNEL_MANIFEST_URL, POD_NETWORK_CIDR
from kubeforge.models.target import DistributionFamily, TargetProfile


@dataclass(frozen=True)
class PackageManager:
    """Package-manager verbs for a distribution family."""

    update: str
    install: str
    add_repository: str


PACKAGE_MANAGERS: Dict[DistributionFamily, PackageManager] = {
    DistributionFamily.DEBIAN: PackageManager(
        update="sudo apt-get update",
        install="sudo apt-get install -y",
        add_repository="sudo apt-add-repository",
    ),
    DistributionFamily.RHEL: PackageManager(
        update="sudo yum update -y",
        install="sudo yum install -y",
        add_repository="sudo yum-config-manager --add-repo",
    ),
}


def package_manager_for(family: DistributionFamily) -> PackageManager:
    return PACKAGE_MANAGERS[family]


# Stage 1: Prerequisites

COMMON_PREREQUISITES = [
    "sudo swapoff -a",
    "sudo sed -i '/swap/d' /etc/fstab",
    "sudo modprobe overlay",
    "sudo modprobe br_netfilter",
    "echo '1' | sudo tee /proc/sys/net/ipv4/ip_forward",
    "echo '1' | sudo tee /proc/sys/net/bridge/bridge-nf-call-iptables",
    "echo '1' | sudo tee /proc/sys/net/bridge/bridge-nf-call-ip6tables",
    "cat <<EOF | sudo tee /etc/modules-load.d/k8s.conf\noverlay\nbr_netfilter\nEOF",
    "cat <<EOF | sudo tee /etc/sysctl.d/k8s.conf\n"
    "net.bridge.bridge-nf-call-iptables = 1\n"
    "net.bridge.bridge-nf-call-ip6tables = 1\n"
    "net.ipv4.ip_forward = 1\n"
    "EOF",
    "sudo sysctl --system",
]


def prerequisite_commands(profile: TargetProfile) -> List[str]:
    """Distribution-specific base packages (provider hostname setup is added by the pipeline)."""
    pm = package_manager_for(profile.family)

    if profile.is_debian_based:
        distro_commands = [
            pm.update,
            f"{pm.install} apt-transport-https ca-certificates curl "
            "software-properties-common gnupg lsb-release",
        ]
    else:
        distro_commands = [
            "sudo setenforce 0 || true",
            "sudo sed -i 's/^SELINUX=enforcing$/SELINUX=permissive/' /etc/selinux/config || true",
            pm.update,
            f"{pm.install} curl wget socat conntrack ebtables ipset",
        ]

    return COMMON_PREREQUISITES + distro_commands


# Stage 2: Container runtime

CONTAINERD_CONFIG = [
    "sudo mkdir -p /etc/containerd",
    "sudo containerd config default | sudo tee /etc/containerd/config.toml",
    "sudo sed -i 's/SystemdCgroup = false/SystemdCgroup = true/g' /etc/containerd/config.toml",
    "sudo systemctl restart containerd",
    "sudo systemctl enable containerd",
]


def container_runtime_commands(profile: TargetProfile) -> List[str]:
    """Install containerd and switch it to the systemd cgroup driver."""
    pm = package_manager_for(profile.family)

    if profile.is_debian_based:
        docker_repo = f"https://download.docker.com/linux/{profile.distribution}"
        commands = [
            "sudo mkdir -p /etc/apt/keyrings",
            f"curl -fsSL {docker_repo}/gpg | sudo gpg --dearmor --yes -o /etc/apt/keyrings/docker.gpg",
            'echo "deb [arch=$(dpkg --print-architecture) signed-by=/etc/apt/keyrings/docker.gpg] '
            f'{docker_repo} $(lsb_release -cs) stable" '
            "| sudo tee /etc/apt/sources.list.d/docker.list > /dev/null",
            pm.update,
            f"{pm.install} containerd.io",
        ]
    else:
        commands = [
            f"{pm.install} yum-utils device-mapper-persistent-data lvm2",
            f"{pm.add_repository} https://download.docker.com/linux/centos/docker-ce.repo",
            f"{pm.install} containerd.io",
        ]

    return commands + CONTAINERD_CONFIG


# Stage 3: Kubernetes components

def kubernetes_commands(profile: TargetProfile) -> List[str]:
    """Add the Kubernetes package repository and install pinned node packages."""
    pm = package_manager_for(profile.family)

    if profile.is_debian_based:
        commands = [
            "sudo mkdir -p /etc/apt/keyrings",
            "sudo curl -fsSLo /etc/apt/keyrings/kubernetes-archive-keyring.gpg "
            "https://packages.cloud.google.com/apt/doc/apt-key.gpg",
            'echo "deb [signed-by=/etc/apt/keyrings/kubernetes-archive-keyring.gpg] '
            'https://apt.kubernetes.io/ kubernetes-xenial main" '
            "| sudo tee /etc/apt/sources.list.d/kubernetes.list",
            pm.update,
            f"{pm.install} kubelet kubeadm kubectl",
            "sudo apt-mark hold kubelet kubeadm kubectl",
        ]
    else:
        commands = [
            "cat <<EOF | sudo tee /etc/yum.repos.d/kubernetes.repo\n"
            "[kubernetes]\n"
            "name=Kubernetes\n"
            "baseurl=https://packages.cloud.google.com/yum/repos/kubernetes-el7-\\$basearch\n"
            "enabled=1\n"
            "gpgcheck=1\n"
            "repo_gpgcheck=1\n"
            "gpgkey=https://packages.cloud.google.com/yum/doc/yum-key.gpg "
            "https://packages.cloud.google.com/yum/doc/rpm-package-key.gpg\n"
            "exclude=kubelet kubeadm kubectl\n"
            "EOF",
            f"{pm.install} kubelet kubeadm kubectl --disableexcludes=kubernetes",
        ]

    return commands + ["sudo systemctl enable --now kubelet"]


# Stage 4: Cluster init

def kubeadm_init_command(provider_options: str = "") -> str:
    command = f"sudo kubeadm init --pod-network-cidr={POD_NETWORK_CIDR}"
    if provider_options:
        command += f" {provider_options}"
    return command


POST_INIT_COMMANDS = [
    "mkdir -p $HOME/.kube",
    "sudo cp -f /etc/kubernetes/admin.conf $HOME/.kube/config",
    "sudo chown $(id -u):$(id -g) $HOME/.kube/config",
    f"kubectl apply -f {FLANNEL_MANIFEST_URL}",
    # Single-node install: let workloads schedule on the control plane
    "kubectl taint nodes --all node-role.kubernetes.io/control-plane- || true",
]

JOIN_TOKEN_COMMAND = "sudo kubeadm token create --print-join-command"
