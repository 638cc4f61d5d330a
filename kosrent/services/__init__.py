# Service layer: every business rule runs here, routers only translate HTTP
