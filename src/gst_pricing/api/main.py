from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from gst_pricing import __version__
from gst_pricing.api.gst_api import router as gst_router
from gst_pricing.api.reports_api import router as reports_router

app = FastAPI(
    title="GST Pricing API",
    description="GST breakdowns, pricing matrices and cart totals for the POS client",
    version=__version__
)

# Enable CORS for frontend development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(gst_router)
app.include_router(reports_router)


@app.get("/")
async def root():
    return {"status": "online", "message": "GST Pricing API Active"}
