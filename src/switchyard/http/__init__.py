"""HTTP primitives: headers, query parameters, request and response."""
