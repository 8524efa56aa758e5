from app.core.models import CamelCaseModel

class HealthCheckResponse(CamelCaseModel):
    status: str = "ok"
    project_name: str
    last_backend_breaking_update: str
