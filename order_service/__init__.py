"""Order Service: order placement and order queries."""
