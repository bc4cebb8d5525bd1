from sqlalchemy import or_, select
from sqlalchemy.orm import Session, selectinload

from ..errors import NotFound
from ..models import Account, Client, Invoice
from ..schemas import ClientWrite


def list_clients(db: Session, account: Account, q: str | None = None) -> list[Client]:
    query = select(Client).where(Client.account_id == account.id).order_by(Client.name)
    if q:
        like = f"%{q}%"
        query = query.where(
            or_(Client.name.ilike(like), Client.ice.ilike(like), Client.email.ilike(like))
        )
    return list(db.scalars(query))


def get_client(db: Session, account: Account, client_id: int) -> Client:
    client = db.execute(
        select(Client).where(Client.id == client_id, Client.account_id == account.id)
    ).scalar_one_or_none()
    if client is None:
        raise NotFound("Client not found.")
    return client


def create_client(db: Session, account: Account, payload: ClientWrite) -> Client:
    client = Client(account_id=account.id, **payload.model_dump())
    db.add(client)
    db.commit()
    db.refresh(client)
    return client


def update_client(
    db: Session, account: Account, client_id: int, payload: ClientWrite
) -> Client:
    client = get_client(db, account, client_id)
    for field, value in payload.model_dump().items():
        setattr(client, field, value)
    db.commit()
    db.refresh(client)
    return client


def delete_client(db: Session, account: Account, client_id: int) -> None:
    client = get_client(db, account, client_id)
    # Cascades to the client's invoices and their items.
    db.delete(client)
    db.commit()


def portal_data(db: Session, client_id: int) -> tuple[Client, list[Invoice], Account]:
    client = db.get(Client, client_id)
    if client is None:
        raise NotFound("Client not found.")
    invoices = list(
        db.scalars(
            select(Invoice)
            .where(Invoice.client_id == client.id)
            .options(selectinload(Invoice.items))
            .order_by(Invoice.issue_date.desc())
        )
    )
    account = db.get(Account, client.account_id)
    return client, invoices, account
