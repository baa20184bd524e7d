from typing import Optional

from fastapi import APIRouter, FastAPI, HTTPException
import structlog

from cipher_stepper.analysis.frequency import analyze_frequency, estimate_cipher_type, suggest_caesar_shift
from cipher_stepper.analysis.kasiski import crack_vigenere, estimate_key_length, find_key_length_by_ic
from cipher_stepper.ciphers.base import Cipher
from cipher_stepper.ciphers.registry import CipherRegistry, build_default_registry
from cipher_stepper.errors import ConfigurationError, UnknownCipherError
from cipher_stepper.export import ExportDocument, export_state
from cipher_stepper.models.state import CipherMode, EncryptionResult

from . import models

log = structlog.get_logger(__name__)

TOP_CANDIDATES = 5


def cipher_info(cipher: Cipher) -> models.CipherInfo:
    return models.CipherInfo(
        id=cipher.id,
        name=cipher.name,
        family=cipher.family,
        description=cipher.description,
        self_inverse=cipher.self_inverse,
        config=cipher.config.to_options(),
        visual_hints=cipher.get_visual_hints().to_dict(),
    )


def create_app(registry: Optional[CipherRegistry] = None) -> FastAPI:
    """Build the API around one registry. Each request configures its own copy of the cipher."""
    if registry is None:
        registry = build_default_registry()

    app = FastAPI(title="Cipher Stepper Playground API")
    router = APIRouter()

    def run_cipher(req: models.RunRequest, mode: CipherMode) -> tuple[Cipher, EncryptionResult]:
        try:
            registered = registry.require(req.cipher)
        except UnknownCipherError as e:
            log.warning("unknown cipher requested", cipher=req.cipher)
            raise HTTPException(status_code=404, detail=str(e))

        cipher = type(registered)(registered.config)
        try:
            cipher.configure(req.options, strict=req.strict)
        except ConfigurationError as e:
            log.warning("rejected configuration", cipher=req.cipher, option=e.option, value=repr(e.value))
            raise HTTPException(status_code=422, detail=str(e))
        result = cipher.run(req.text, mode)

        log.info(
            "ran cipher",
            cipher=cipher.id,
            mode=mode,
            input_len=len(req.text),
            output_len=len(result.ciphertext),
        )
        return cipher, result

    def build_run_response(req: models.RunRequest, mode: CipherMode) -> models.RunResponse:
        cipher, result = run_cipher(req, mode)
        history = None
        if req.trace:
            history = [
                models.TraceStep(
                    step=state.step,
                    plaintext=state.plaintext,
                    ciphertext=state.ciphertext,
                    data=state.data.to_dict(),
                )
                for state in result.history
            ]
        return models.RunResponse(
            cipher=cipher.id,
            mode=mode,
            input=result.final_state.plaintext,
            output=result.ciphertext,
            config=cipher.config.to_options(),
            data=result.final_state.data.to_dict(),
            history=history,
        )

    @router.get("/ciphers", response_model=list[models.CipherInfo])
    def list_ciphers():
        """ Registered ciphers and their current configuration. """
        return [cipher_info(cipher) for cipher in registry.get_all()]

    @router.post("/encrypt", response_model=models.RunResponse)
    def encrypt(req: models.RunRequest):
        return build_run_response(req, "encrypt")

    @router.post("/decrypt", response_model=models.RunResponse)
    def decrypt(req: models.RunRequest):
        """ Self-inverse ciphers ignore the mode, so this is the same as encrypting. """
        return build_run_response(req, "decrypt")

    @router.post("/analyze", response_model=models.AnalyzeResponse)
    def analyze(req: models.AnalyzeRequest):
        analysis = analyze_frequency(req.text)
        log.info("analyzed text", letters=analysis.total_letters, ic=round(analysis.index_of_coincidence, 4))
        return models.AnalyzeResponse(
            total_letters=analysis.total_letters,
            counts={f.letter: f.count for f in analysis.frequencies},
            index_of_coincidence=analysis.index_of_coincidence,
            chi_squared=analysis.chi_squared,
            cipher_type=estimate_cipher_type(analysis.index_of_coincidence),
            most_frequent=list(analysis.most_frequent),
            least_frequent=list(analysis.least_frequent),
            caesar_shifts=[
                models.ShiftCandidate(shift=s.shift, confidence=s.confidence, chi_squared=s.chi_squared)
                for s in suggest_caesar_shift(req.text)[:TOP_CANDIDATES]
            ],
            kasiski=[
                models.KeyLengthScore(length=c.length, score=c.score)
                for c in estimate_key_length(req.text)[:TOP_CANDIDATES]
            ],
            ic_key_lengths=[
                models.KeyLengthScore(length=c.length, score=c.average_ic)
                for c in find_key_length_by_ic(req.text, req.max_key_length)[:TOP_CANDIDATES]
            ],
            vigenere=[
                models.KeywordCandidate(keyword=c.keyword, chi_squared=c.chi_squared, preview=c.preview)
                for c in crack_vigenere(req.text, req.max_key_length)
            ],
        )

    @router.post("/export", response_model=ExportDocument)
    def export(req: models.RunRequest):
        """ Encrypt and return the final state as a downloadable document. """
        cipher, result = run_cipher(req, "encrypt")
        return export_state(cipher, result.final_state, "encrypt")

    app.include_router(router, prefix="/api")
    return app


app = create_app()
