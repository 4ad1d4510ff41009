from fastapi import HTTPException, Request, status

from taxonomy_admin.services.workspace import TaxonomyWorkspace


async def get_workspace(request: Request) -> TaxonomyWorkspace:
    workspace = getattr(request.app.state, "workspace", None)
    if workspace is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Taxonomy workspace is not ready.",
        )
    return workspace
