from fastapi import FastAPI
from pydantic import BaseModel
from config import LEX_URL as LEX, PARSE_URL as PARSE, HTTP_TIMEOUT, SOURCE_NAME
from errors import CalcError
from formatter import format_result
from models import ApiOk
import calc
import httpx, uuid

app = FastAPI(title="gateway")

@app.get("/healthz")
def healthz():
    return {"ok": True}

class RunReq(BaseModel):
    source: str
    filename: str = SOURCE_NAME

@app.post("/run")
async def run(req: RunReq):
    rid = str(uuid.uuid4())
    hdr = {"X-Request-Id": rid}

    async with httpx.AsyncClient(timeout=HTTP_TIMEOUT) as c:
        # Step 1: Lexical analysis
        lex = (await c.post(LEX, json={"source": req.source, "filename": req.filename}, headers=hdr)).json()
        if not lex.get("ok"):
            return lex

        # Step 2: parser parses and forwards the AST to the evaluator
        return (await c.post(PARSE, json={"tokens": lex["data"]}, headers=hdr)).json()


@app.post("/eval")
def eval_local(req: RunReq):
    # same pipeline without the network hops
    try:
        res = calc.run(req.source, req.filename)
    except CalcError as e:
        return e.to_api_err()
    return ApiOk(data={"result": res.model_dump(), "display": format_result(res)})
