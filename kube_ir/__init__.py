"""Plan -> IR construction and IR optimization passes for Kubernetes-style workloads."""
