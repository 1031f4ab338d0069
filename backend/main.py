import os
import uvicorn
from fastapi import FastAPI
from routes import router

app = FastAPI(title="Translation Manzai")
app.include_router(router)


def run():
    uvicorn.run(app, host=os.getenv("HOST", "0.0.0.0"), port=int(os.getenv("PORT", "3000")))


if __name__ == "__main__":
    run()
