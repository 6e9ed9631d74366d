# Services package init
"""
Fleet Management API — Services Layer
=====================================

What:  Business rules between the HTTP routes and the repositories.
How:   Services take an AsyncSession per call, validate inputs, invoke the
       repositories and map ORM rows to transfer records.

Service Inventory:
    - TokenIssuer:        JWT issue / decode (PyJWT)
    - AuthService:        login, sign-up, principal loading (argon2 hashes)
    - TrajectoryService:  trajectory queries, latest positions, export rows
    - TaxiService:        taxi catalogue search by plate
    - SpreadsheetService: export rows → .xlsx bytes (openpyxl)
    - EmailService:       SMTP notifications with optional attachment
"""
