"""
Roster, game, shot entry and statistics routes.

Every route works on the signed-in user's :class:`AppController`.
Mutating routes answer with the resulting state; an input that the engine
ignores (blank name, step out of order, ...) is not an HTTP error, the
state simply comes back unchanged.
"""

from dataclasses import asdict

from fastapi import APIRouter, Depends, Request

from ..auth import User
from ..engine import AppController
from ..stats import ALL_GAMES
from .auth import current_user
from .schemas import NameInput, ShotPlayerInput, ShotResultInput, ShotTypeInput, state_out, wizard_out

router = APIRouter()


async def get_controller(request: Request, user: User = Depends(current_user)) -> AppController:
    """
    The user's controller, created and loaded on first use.

    A controller whose load failed is not kept, so the next request loads
    again instead of working from a partial state.
    """
    controllers = request.app.state.controllers
    async with request.app.state.controllers_lock:
        controller = controllers.get(user.id)
        if controller is None:
            settings = request.app.state.settings
            controller = AppController(
                request.app.state.store,
                user.id,
                quiet_period=settings.team_save_quiet_period,
                date_locale=settings.date_locale,
            )
            await controller.load()
            if controller.ready:
                controllers[user.id] = controller
    return controller


@router.get("/state", tags=["Roster"])
async def get_state(controller: AppController = Depends(get_controller)) -> dict:
    return state_out(controller)


@router.put("/team", tags=["Roster"])
async def set_team_name(body: NameInput, controller: AppController = Depends(get_controller)) -> dict:
    """Rename the team.  The write happens after the quiet period."""
    controller.roster.set_team_name(body.name)
    return state_out(controller)


@router.post("/players", tags=["Roster"])
async def add_player(body: NameInput, controller: AppController = Depends(get_controller)) -> dict:
    await controller.roster.add_player(body.name)
    return state_out(controller)


@router.patch("/players/{player_id}", tags=["Roster"])
async def rename_player(player_id: int, body: NameInput, controller: AppController = Depends(get_controller)) -> dict:
    await controller.roster.rename_player(player_id, body.name)
    return state_out(controller)


@router.delete("/players/{player_id}", tags=["Roster"])
async def remove_player(player_id: int, controller: AppController = Depends(get_controller)) -> dict:
    await controller.roster.remove_player(player_id)
    return state_out(controller)


@router.post("/games", tags=["Game"])
async def create_game(body: NameInput, controller: AppController = Depends(get_controller)) -> dict:
    await controller.session.create_game(body.name)
    return state_out(controller)


@router.post("/games/{game_id}/select", tags=["Game"])
async def select_game(game_id: int, controller: AppController = Depends(get_controller)) -> dict:
    controller.session.select_game(game_id)
    return state_out(controller)


@router.get("/wizard", tags=["Game"])
async def get_wizard(controller: AppController = Depends(get_controller)) -> dict:
    return controller.wizard.snapshot()


@router.post("/wizard/type", tags=["Game"])
async def choose_type(body: ShotTypeInput, controller: AppController = Depends(get_controller)) -> dict:
    return wizard_out(controller, controller.wizard.choose_type(body.type))


@router.post("/wizard/result", tags=["Game"])
async def choose_result(body: ShotResultInput, controller: AppController = Depends(get_controller)) -> dict:
    return wizard_out(controller, controller.wizard.choose_result(body.result))


@router.post("/wizard/player", tags=["Game"])
async def choose_player(body: ShotPlayerInput, controller: AppController = Depends(get_controller)) -> dict:
    return wizard_out(controller, controller.wizard.choose_player(body.player_name))


@router.post("/wizard/back", tags=["Game"])
async def wizard_back(controller: AppController = Depends(get_controller)) -> dict:
    return wizard_out(controller, controller.wizard.back())


@router.post("/wizard/cancel", tags=["Game"])
async def wizard_cancel(controller: AppController = Depends(get_controller)) -> dict:
    controller.wizard.cancel()
    return wizard_out(controller, True)


@router.post("/wizard/confirm", tags=["Game"])
async def wizard_confirm(controller: AppController = Depends(get_controller)) -> dict:
    shot = await controller.wizard.confirm()
    return wizard_out(controller, shot is not None, shot)


@router.get("/stats/team", tags=["Stats"])
async def get_team_stats(scope: str = ALL_GAMES, controller: AppController = Depends(get_controller)) -> dict:
    return asdict(controller.team_stats(scope))


@router.get("/stats/players", tags=["Stats"])
async def get_player_stats(scope: str = ALL_GAMES, controller: AppController = Depends(get_controller)) -> list:
    return [asdict(p) for p in controller.player_stats(scope)]


@router.get("/stats", tags=["Stats"])
async def get_stats(scope: str = ALL_GAMES, controller: AppController = Depends(get_controller)) -> dict:
    return {
        "scope": scope,
        "team": asdict(controller.team_stats(scope)),
        "players": [asdict(p) for p in controller.player_stats(scope)],
    }
