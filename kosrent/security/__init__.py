# Security: authentication and ownership checks
