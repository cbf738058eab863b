"""
LocalPros Backend — Services Layer
====================================

What:  Business logic between routes (HTTP) and the database (persistence).
How:   Stateless service classes exposed as module-level singletons; each
       call receives the request's AsyncSession explicitly.

Service Inventory:
    - FileService: image validation, storage, serving and cleanup
    - AccountService: registration, login, profile, profile picture
    - ProfessionalService: directory listing, detail, ratings
    - PortfolioService: a professional's ordered portfolio
    - ServiceRequestService: request lifecycle and ratings
"""
