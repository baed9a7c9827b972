"""HTTP primitives — methods, headers, query strings, requests, responses."""
