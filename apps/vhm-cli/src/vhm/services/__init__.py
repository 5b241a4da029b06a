"""Site store, vhost rendering and Apache synchronisation."""
