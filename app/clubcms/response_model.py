from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def ResponseModel(message: str, status_code: int = status.HTTP_200_OK, **data):
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder({"message": message, **data}),
    )


def ErrorResponseModel(message: str, code: int):
    return JSONResponse(status_code=code, content={"message": message})
