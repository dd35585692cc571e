"""
Kubernix bootstraps a single-host Kubernetes development cluster.

The package launches the cluster's external programs (etcd, the API server,
the controller manager, the scheduler, the proxy and the kubelet), supervises
them as child processes and tears them down again as a unit.
"""
