"""FastAPI application for Statement OCR."""

from fastapi import Depends, FastAPI, File, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from statement_ocr.config import Settings, get_settings
from statement_ocr.errors import BatchExtractionError, ConfigurationError
from statement_ocr.logging_setup import configure_logging
from statement_ocr.models import DocumentInput, Transaction
from statement_ocr.services.export import transactions_to_csv
from statement_ocr.services.session import ExtractionSession, SessionResult

app = FastAPI(
    title="Statement OCR",
    description="Extract and categorize transactions from bank statement PDFs and images",
    version="0.1.0",
)

# CORS for the browser frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def startup():
    """Initialize on startup."""
    settings = get_settings()
    configure_logging(settings.log_level)
    settings.log_config()


@app.get("/health")
async def health_check(settings: Settings = Depends(get_settings)):
    """Health check endpoint."""
    return {"status": "healthy", "llm_provider": settings.llm_provider, "model": settings.model_name}


@app.post("/extract", response_model=SessionResult)
async def extract(files: list[UploadFile] = File(...), settings: Settings = Depends(get_settings)):
    """Extract a sorted ledger and insights from one or more statements (PDF or image)."""
    documents = []
    for upload in files:
        if not upload.filename:
            raise HTTPException(status_code=400, detail="No filename provided")
        contents = await upload.read()
        documents.append(DocumentInput.from_filename(upload.filename, contents, upload.content_type))

    try:
        session = ExtractionSession(settings)
    except ConfigurationError as e:
        raise HTTPException(status_code=500, detail=str(e))

    try:
        return await session.run(documents)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except BatchExtractionError as e:
        raise HTTPException(
            status_code=422,
            detail={
                "message": f"An error occurred during extraction: {e.message}. Please try again.",
                "document": e.document_name,
                "kind": e.kind,
            },
        )


@app.post("/export/csv")
async def export_csv(transactions: list[Transaction]):
    """Download transactions as CSV."""
    return Response(
        content=transactions_to_csv(transactions),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": 'attachment; filename="transactions.csv"'},
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=get_settings().api_host, port=get_settings().api_port)
