import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from backend.core import config
from backend.core.errors import PSUFlowError, ValidationError
from backend.database import Base, engine, ensure_appointment_schema, ensure_blocked_slot_schema
from backend.models import announcement, appointment, blocked_slot, notification, user  # noqa: F401
from backend.routes import (
    appointment_routes,
    attachment_routes,
    auth_routes,
    faculty_routes,
    notification_routes,
    queue_routes,
    staff_routes,
)

logging.basicConfig(
    level=config.LOG_LEVEL,
    format='%(asctime)s %(levelname)s %(name)s: %(message)s',
)

logger = logging.getLogger(__name__)

app = FastAPI(title='PSUFlow API')

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)


@app.on_event('startup')
def initialize_database() -> None:
    config.validate_runtime_config()
    try:
        Base.metadata.create_all(bind=engine)
        ensure_appointment_schema()
        ensure_blocked_slot_schema()
    except SQLAlchemyError:
        logger.exception('Database initialization failed. Check DATABASE_URL and database credentials.')


@app.exception_handler(PSUFlowError)
async def psuflow_error_handler(request: Request, exc: PSUFlowError):
    if exc.status_code >= 500:
        logger.error('%s %s failed: %s', request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    logger.warning('Validation error for %s: %s', request.url.path, exc.errors())
    content = ValidationError('Invalid request.').to_dict()
    content['errors'] = jsonable_encoder(exc.errors())
    return JSONResponse(status_code=ValidationError.status_code, content=content)


@app.get('/')
def root():
    return {'status': 'PSUFlow API Running'}


app.include_router(auth_routes.router, prefix='/auth')
app.include_router(appointment_routes.router, prefix='/appointments')
app.include_router(faculty_routes.router, prefix='/faculty')
app.include_router(staff_routes.router, prefix='/staff')
app.include_router(notification_routes.router, prefix='/notifications')
app.include_router(attachment_routes.router, prefix='/attachments')
app.include_router(queue_routes.router)
