from typing import Annotated, cast

from fastapi import Depends, Request, WebSocket

from backoffice.app import App


async def get_app(request: Request) -> App:
    return cast(App, request.app.state.app)


async def get_ws_app(websocket: WebSocket) -> App:
    return cast(App, websocket.app.state.app)


# Type aliases for dependencies
AppDep = Annotated[App, Depends(get_app)]
WsAppDep = Annotated[App, Depends(get_ws_app)]
