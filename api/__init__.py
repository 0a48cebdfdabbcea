"""HTTP and WebSocket API for the cross-chain tracker."""
