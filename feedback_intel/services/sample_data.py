"""Sample feedback from the cloudflare/cloudflared issue tracker, for demos and local testing."""

from feedback_intel.models.base import utcnow
from feedback_intel.models.feedback import FeedbackCreate

SAMPLE_CLOUDFLARED_FEEDBACK: list[dict[str, str | None]] = [
    {
        "id": "gh-001",
        "title": "Question regarding Cloudflare WARP VPN client usage",
        "content": (
            "I would value your opinion on whether it is safe to use the consumer version "
            "of the Cloudflare WARP client within the organization. I am specifically "
            "concerned about the security of the tunnels."
        ),
        "label": "Question",
        "author": "enterprise-user",
    },
    {
        "id": "gh-002",
        "title": "After fallback to http2 cloudflared never attempts quic again",
        "content": (
            "Our networking was down for a bit. An instance of cloudflared started, and was "
            "unable to connect to quic (as networking was down). cloudflared started trying "
            "http2 instead (which failed, as we only allow cloudflared to talk quic in our "
            "firewall). Networking came up. QUIC was never tried again; and hence cloudflared "
            "sat there retrying http2 forever."
        ),
        "label": "bug",
        "author": "production-user",
    },
    {
        "id": "gh-003",
        "title": (
            "Cloudflare Tunnel subdomain intermittently fails when parent domain is hosted "
            "on Active Directory DNS"
        ),
        "content": (
            "We are using Cloudflare Tunnel (cloudflared) to expose an internal application "
            "using HTTPS for a small project. The tunnel works correctly for external / "
            "non-domain devices, but fails for Windows domain-joined machines when the parent "
            "domain is hosted on Active Directory integrated DNS. The setup worked for about a "
            "week and then started failing consistently."
        ),
        "label": None,
        "author": "ad-admin",
    },
    {
        "id": "gh-004",
        "title": "NEED HELP - Firewall - Docker - Allow cloudflared only connect to Cloudflare",
        "content": (
            "Thank for you for great product. I installed cloudflared for proxing request to "
            "my Frigate NVR running inside Docker under Ubuntu. So now I'm guessing how to "
            "setup ufw to allow cloudflared to connect to Cloudflare and block everything else."
        ),
        "label": "Question",
        "author": "home-user",
    },
    {
        "id": "gh-005",
        "title": "Please publish containers also on ghcr inside this repo",
        "content": (
            "Please also publish the container images to ghcr it is for free and not have any "
            "pull limits like docker.io which are a pain"
        ),
        "label": "Feature Request",
        "author": "devops-user",
    },
    {
        "id": "gh-006",
        "title": "The cloudflared package cannot be installed via apt and deb packages",
        "content": (
            "Installation of the cloudflared package is not possible, the download speed is "
            "2.6 PB/sec. Packets are ignored."
        ),
        "label": "Bug",
        "author": "linux-user",
    },
    {
        "id": "gh-007",
        "title": "Documentation for access policies is outdated and misleading",
        "content": (
            "I've been trying to configure access policies for our tunnel for three days now. "
            "The documentation says to use `cloudflared access` commands but half the flags "
            "mentioned don't exist in the current version. I followed the official guide "
            "step-by-step and it just doesn't work. This is really frustrating. We chose "
            "Cloudflare Tunnel specifically because of the promised simplicity, but I've spent "
            "more time debugging docs than actually building. Our team is starting to question "
            "whether we should just go back to a traditional VPN setup. Can someone please "
            "update the docs or at least add a version disclaimer?"
        ),
        "label": "Documentation",
        "author": "frustrated-team-lead",
    },
    {
        "id": "gh-008",
        "title": "Tunnel disconnects silently under memory pressure, no reconnect attempt",
        "content": (
            "Environment: Ubuntu 22.04, cloudflared 2024.1.5, running as systemd service. When "
            "the host system experiences memory pressure (OOM killer activated for other "
            "processes), cloudflared loses its connection to the edge but does not attempt to "
            "reconnect. The process remains running with no errors in logs. The tunnel appears "
            "healthy in the dashboard but no traffic passes through. Steps to reproduce: 1. Run "
            "cloudflared tunnel with default config 2. Simulate memory pressure 3. Wait for OOM "
            "killer to free memory 4. Observe tunnel status. Expected behavior: cloudflared "
            "should detect connection loss and reconnect automatically. Workaround: Manual "
            "service restart recovers the tunnel. This is affecting three production nodes in "
            "our cluster."
        ),
        "label": "Bug",
        "author": "sre-engineer",
    },
    {
        "id": "gh-009",
        "title": "WHY is there no GUI?? This is ridiculous in 2024",
        "content": (
            "Seriously, why do I have to use the command line for everything? Not everyone is a "
            "Linux sysadmin. I just want to click a button to start my tunnel like a normal "
            "application. I tried to set this up for my home server to access my Plex remotely "
            "and I had to watch THREE YouTube videos just to understand what a config.yml even "
            "is. This is absolutely unacceptable for a company the size of Cloudflare. Other "
            "tunnel solutions have nice desktop apps. Why can't you just make a simple GUI "
            "wrapper? How hard can it be??? I'm mad that I wasted my entire Saturday on this. "
            "Terrible UX. Zero stars."
        ),
        "label": "Feature Request",
        "author": "home-plex-user",
    },
]


def get_sample_feedback() -> list[FeedbackCreate]:
    """Build the sample items, stamped with the current time."""
    now = utcnow()
    return [
        FeedbackCreate(source="github", created_at=now, **item)  # type: ignore[arg-type]
        for item in SAMPLE_CLOUDFLARED_FEEDBACK
    ]
