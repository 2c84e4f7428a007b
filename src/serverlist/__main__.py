from serverlist.apps.cli.app import app

app(prog_name="serverlist")
