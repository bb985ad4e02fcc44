"""
FastAPI backend service for statement interpretation.
"""
from fastapi import FastAPI, File, UploadFile, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from typing import Optional
import logging

from bankscan.core.detectors import LayoutRegistry, default_layout
from bankscan.core.runner import parse_statement, StatementInterpreter
from bankscan.exceptions import DocumentError, LayoutNotFoundError

app = FastAPI(title="bankscan Statement Interpreter", version="1.0.0")

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://localhost:3000"],  # Vite and other dev servers
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class InterpretRequest(BaseModel):
    text: str
    layout: Optional[str] = None


class DetectRequest(BaseModel):
    text: str


def _summary_counts(summary) -> dict:
    return {
        "purchases_count": len(summary.purchases),
        "total_deposits": float(summary.total_deposits),
        "total_atm_withdrawals": float(summary.total_atm_withdrawals),
    }


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"message": "bankscan Statement Interpreter API", "status": "healthy"}


@app.post("/parse")
async def parse_pdf(file: UploadFile = File(...), layout: Optional[str] = Query(None)):
    """
    OCR an uploaded scanned statement and return its summary.

    Args:
        file: Uploaded PDF file
        layout: Layout ID to use (detected when omitted)

    Returns:
        Interpreted statement data as JSON
    """
    if not file.filename or not file.filename.lower().endswith('.pdf'):
        raise HTTPException(status_code=400, detail="File must be a PDF")

    pdf_data = await file.read()
    logger.info(f"Processing PDF: {file.filename}")

    try:
        result = await parse_statement(pdf_data, layout)
    except LayoutNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except DocumentError as e:
        logger.error(f"Error parsing PDF: {e}")
        raise HTTPException(status_code=500, detail=f"Error parsing PDF: {str(e)}")

    result.source = file.filename
    data = result.model_dump(mode="json")
    logger.info(f"Successfully parsed PDF: {len(data['summary']['purchases'])} purchases found")

    return JSONResponse(content={
        "success": True,
        "data": data,
        "layout_used": result.layout_id,
        "summary": _summary_counts(result.summary),
    })


@app.post("/interpret")
async def interpret(request: InterpretRequest):
    """Interpret already recognized statement text."""
    try:
        layout = LayoutRegistry().get_layout(request.layout) if request.layout else default_layout()
    except LayoutNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    summary = StatementInterpreter(layout).interpret(request.text)
    return JSONResponse(content={
        "success": True,
        "data": summary.model_dump(mode="json"),
        "layout_used": layout.layout_id,
        "summary": _summary_counts(summary),
    })


@app.post("/detect-layout")
async def detect_text_layout(request: DetectRequest):
    """Detect which layout matches recognized statement text."""
    layout_id = LayoutRegistry().detect_layout(request.text)
    if not layout_id:
        raise HTTPException(status_code=400, detail="No matching layout found")

    return JSONResponse(content={
        "success": True,
        "layout": layout_id
    })


@app.get("/layouts")
async def list_layouts():
    """List all available layouts."""
    registry = LayoutRegistry()
    return JSONResponse(content={
        "success": True,
        "layouts": [
            {
                "id": layout_id,
                "bank": registry.get_layout(layout_id).bank,
            }
            for layout_id in registry.list_layouts()
        ]
    })


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
