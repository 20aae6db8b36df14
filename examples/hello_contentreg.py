import logging

import contentreg


def main() -> None:
    logging.basicConfig(level=logging.INFO)

    server = contentreg.run(admin="curator", rule="ipfs:", new_server=True)
    client = server.as_client()

    cid = client.register("alice", "ipfs:QmArtwork")
    print("registered", cid, client.get_content(cid))

    # Same fingerprint from someone else: same id, owner unchanged.
    print("re-registered", client.register("bob", "ipfs:QmArtwork"), client.get_content(cid))

    client.transfer_ownership("alice", cid, "bob")
    print("after transfer", client.get_content(cid))

    try:
        client.register("mallory", "http://not-ipfs")
    except contentreg.InvalidContent as ex:
        print("rejected:", ex)

    upload_id, fingerprint = client.upload("carol", b"raw artwork bytes", prefix="ipfs:")
    print("uploaded", upload_id, fingerprint.decode())


if __name__ == "__main__":
    main()
