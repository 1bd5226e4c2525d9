# api/main.py
"""
FastAPI backend for framecheck - exposes the analysis engine as a REST API.
"""

import logging
import os
from typing import Any, Dict, List, Optional, Union

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from framecheck import __version__
from framecheck.analysis import analyze
from framecheck.config import AnalysisOptions
from framecheck.model import structure_from_dict
from framecheck.section import SectionError, section_from_dict, section_properties

logging.basicConfig(
    level=os.environ.get("FRAMECHECK_LOG_LEVEL", "INFO"),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("framecheck.api")


app = FastAPI(
    title="framecheck API",
    description="3D frame analysis and code compliance engine",
    version=__version__,
)

# CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

NodeId = Union[int, str]


# =============================================================================
# Request Models
# =============================================================================

class NodeData(BaseModel):
    """Node geometry and supports."""
    id: NodeId
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    supports: Optional[Union[str, Dict[str, bool], List[bool]]] = Field(
        None, description="Preset (fixed, pinned, roller, free), flag mapping or 6 flags"
    )


class ElementData(BaseModel):
    """Frame element with material and section."""
    id: NodeId
    ni: NodeId
    nj: NodeId
    kind: str = Field("beam", description="beam, column or brace")
    material: Union[str, Dict[str, Any]] = Field(..., description="Catalog name or material record")
    section: Dict[str, Any] = Field(..., description="Section record with a 'type' tag")
    roll: float = Field(0.0, description="Section roll about the member axis (deg)")


class LoadData(BaseModel):
    """Point load on a node DOF."""
    id: Optional[NodeId] = None
    node: NodeId
    direction: str = Field(..., description="x, y, z, rx, ry or rz")
    magnitude: float
    case: str = Field("dead", description="dead, live, wind or seismic")


class StructureData(BaseModel):
    nodes: List[NodeData]
    elements: List[ElementData]
    loads: List[LoadData] = []


class OptionsData(BaseModel):
    """Subset of AnalysisOptions exposed over HTTP; omitted fields keep defaults."""
    include_shear_deformation: Optional[bool] = None
    bc_method: Optional[str] = None
    tolerance: Optional[float] = Field(None, gt=0.0)
    max_iterations: Optional[int] = Field(None, ge=1)
    relative_tolerance: Optional[bool] = None
    load_factors: Optional[Dict[str, float]] = None
    design_factors: Optional[Dict[str, float]] = None
    deflection_limits: Optional[Dict[str, float]] = None
    rule_sets: Optional[List[str]] = None


class AnalyzeRequest(BaseModel):
    structure: StructureData
    options: OptionsData = OptionsData()


# =============================================================================
# API Endpoints
# =============================================================================

@app.get("/health")
async def health():
    """Health check."""
    return {"status": "ok", "service": "framecheck API", "version": __version__}


@app.post("/analyze")
def run_analysis(request: AnalyzeRequest) -> Dict[str, Any]:
    """Analyze a structure; malformed input returns 422."""
    try:
        options = AnalysisOptions.from_dict(request.options.model_dump(exclude_none=True))
        structure = structure_from_dict(request.structure.model_dump(exclude_none=True))
        result = analyze(structure, options)
    except ValueError as e:
        # ValidationError, SectionError and bad options are all ValueErrors
        logger.info("Rejected analysis request: %s", e)
        raise HTTPException(status_code=422, detail=str(e))

    return result.as_dict()


@app.post("/sections/properties")
def get_section_properties(section: Dict[str, Any]) -> Dict[str, Any]:
    """Derived properties of a section record."""
    try:
        props = section_properties(section_from_dict(section))
    except (SectionError, TypeError) as e:
        raise HTTPException(status_code=422, detail=str(e))
    return props.as_dict()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
