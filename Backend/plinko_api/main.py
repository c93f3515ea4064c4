import logging

from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from plinko_api.routers import plinko, rounds

logging.basicConfig(level=logging.INFO)

app = FastAPI(title="Plinko API (Provably Fair)")

# Routers
app.include_router(rounds.router)
app.include_router(plinko.router)


@app.get("/", include_in_schema=False)
def root():
    return RedirectResponse(url="/docs")


@app.get("/healthz")
def healthz():
    return {"ok": True}
