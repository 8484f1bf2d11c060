"""HTTP surface: routes, token gate and status report."""
